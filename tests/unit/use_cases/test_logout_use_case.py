from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.session_manager import SessionValidation
from src.app.use_cases.auth.logout_use_case import LogoutUseCase
from src.domain.base import utcnow
from src.domain.entities import Session, User


@pytest.mark.asyncio
async def test_logout_invalidates_session(mock_session_manager):
    # Arrange
    session = Session(id="sess-1", user_id="user-1", expires_at=utcnow() + timedelta(days=1))
    context = MagicMock()
    context.session_manager = mock_session_manager
    context.validate = AsyncMock(
        return_value=SessionValidation(user=User(id="user-1", email="u@acme.io"), session=session)
    )

    # Act
    result = await LogoutUseCase(context).execute()

    # Assert
    assert result.is_ok()
    assert result.value.logged_out is True
    assert result.value.cookie.value == ""
    mock_session_manager.invalidate_session.assert_called_once_with("sess-1")
    context.forget.assert_called_once()


@pytest.mark.asyncio
async def test_logout_without_session_is_noop(mock_session_manager):
    context = MagicMock()
    context.session_manager = mock_session_manager
    context.validate = AsyncMock(return_value=SessionValidation.empty())

    result = await LogoutUseCase(context).execute()

    assert result.is_ok()
    assert result.value.logged_out is False
    assert result.value.cookie is None
    mock_session_manager.invalidate_session.assert_not_called()
