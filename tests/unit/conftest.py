from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.app.services.cookies import CookieDirective
from src.app.services.policy import AuthPolicy
from src.domain.base import utcnow
from src.domain.entities import Session


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.delete = AsyncMock(return_value=True)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.delete_by_id = AsyncMock(return_value=True)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)

    uow.email_verification_codes = MagicMock()
    uow.email_verification_codes.get = AsyncMock(return_value=None)
    uow.email_verification_codes.create = AsyncMock(side_effect=lambda code: code)
    uow.email_verification_codes.update = AsyncMock(side_effect=lambda code: code)
    uow.email_verification_codes.delete = AsyncMock(return_value=True)
    uow.email_verification_codes.delete_by_user_id = AsyncMock(return_value=0)

    uow.reset_password_tokens = MagicMock()
    uow.reset_password_tokens.get_by_id = AsyncMock(return_value=None)
    uow.reset_password_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.reset_password_tokens.delete_by_id = AsyncMock(return_value=True)
    uow.reset_password_tokens.delete_by_user_id = AsyncMock(return_value=0)

    return uow


@pytest.fixture
def policy():
    return AuthPolicy()


@pytest.fixture
def password_hasher():
    # Low cost keeps the suite fast; the algorithm is the same
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def mock_session_manager():
    """SessionManager double whose create_session mints a real Session row."""
    manager = MagicMock()

    async def create_session(user_id):
        session = Session(
            id=f"session-{user_id}",
            user_id=user_id,
            expires_at=utcnow() + timedelta(days=30),
        )
        return session, CookieDirective(name="session", value=session.id)

    manager.create_session = AsyncMock(side_effect=create_session)
    manager.invalidate_user_sessions = AsyncMock(return_value=1)
    manager.invalidate_session = AsyncMock(return_value=True)
    manager.create_blank_session_cookie = MagicMock(
        return_value=CookieDirective(name="session", value="", max_age=0)
    )
    return manager


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send_email = AsyncMock(return_value="msg-1")
    return notifier
