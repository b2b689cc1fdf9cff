"""
Session Manager

Issues, validates, rotates and invalidates sessions, and produces the
cookie directives that go with them.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from src.app.services.cookies import CookieDirective
from src.app.services.policy import AuthPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_id_from_entropy, utcnow
from src.domain.entities import Session, User

logger = logging.getLogger(__name__)


@dataclass
class SessionValidation:
    """Result of validating a session id.

    Either both ``user`` and ``session`` are set or neither is. ``fresh`` is
    True when the session was just rotated and its cookie must be re-sent.
    """

    user: Optional[User] = None
    session: Optional[Session] = None
    fresh: bool = False

    @classmethod
    def empty(cls) -> "SessionValidation":
        return cls()


class SessionManager:
    """
    Session lifecycle on top of the session repository.

    Business Rules:
    - New sessions expire 30 days after issuance
    - A valid session inside the renewal window (last half of its lifetime)
      is rotated: new id, new expiry, marked fresh
    - Expired sessions are deleted when touched
    - Invalidation is a hard delete and idempotent
    """

    def __init__(
        self,
        uow: UnitOfWork,
        policy: Optional[AuthPolicy] = None,
        cookie_name: str = "session",
        secure_cookie: bool = False,
    ):
        self.uow = uow
        self.policy = policy or AuthPolicy()
        self.cookie_name = cookie_name
        self.secure_cookie = secure_cookie

    async def create_session(self, user_id: str) -> Tuple[Session, CookieDirective]:
        async with self.uow:
            session = await self.uow.sessions.create(self._new_session(user_id))
            await self.uow.commit()

        return session, self.create_session_cookie(session.id)

    async def validate_session(self, session_id: Optional[str]) -> SessionValidation:
        if not session_id:
            return SessionValidation.empty()

        async with self.uow:
            session = await self.uow.sessions.get_by_id(session_id)
            if session is None:
                return SessionValidation.empty()

            now = utcnow()
            if session.expires_at <= now:
                await self.uow.sessions.delete_by_id(session.id)
                await self.uow.commit()
                return SessionValidation.empty()

            user = await self.uow.users.get_by_id(session.user_id)
            if user is None:
                await self.uow.sessions.delete_by_id(session.id)
                await self.uow.commit()
                return SessionValidation.empty()

            if session.expires_at - now >= self.policy.session_renewal_window:
                return SessionValidation(user=user, session=session, fresh=False)

            # Rotate: the old id stops working in the same transaction
            await self.uow.sessions.delete_by_id(session.id)
            rotated = await self.uow.sessions.create(self._new_session(user.id))
            await self.uow.commit()

        logger.info("Rotated session for user %s", user.id)
        return SessionValidation(user=user, session=rotated, fresh=True)

    async def invalidate_session(self, session_id: str) -> bool:
        async with self.uow:
            deleted = await self.uow.sessions.delete_by_id(session_id)
            await self.uow.commit()
        return deleted

    async def invalidate_user_sessions(self, user_id: str) -> int:
        async with self.uow:
            count = await self.uow.sessions.delete_all_by_user_id(user_id)
            await self.uow.commit()
        return count

    def read_session_cookie(self, cookies: Mapping[str, str]) -> Optional[str]:
        return cookies.get(self.cookie_name) or None

    def create_session_cookie(self, session_id: str) -> CookieDirective:
        # No Max-Age: validity is enforced server-side through expires_at
        return CookieDirective(
            name=self.cookie_name,
            value=session_id,
            http_only=True,
            same_site="strict",
            secure=self.secure_cookie,
        )

    def create_blank_session_cookie(self) -> CookieDirective:
        return CookieDirective(
            name=self.cookie_name,
            value="",
            http_only=True,
            same_site="strict",
            secure=self.secure_cookie,
            max_age=0,
        )

    def _new_session(self, user_id: str) -> Session:
        return Session(
            id=generate_id_from_entropy(25),
            user_id=user_id,
            expires_at=utcnow() + self.policy.session_expires_in,
        )


class RequestAuthContext:
    """Per-request memoization of the session validation.

    One instance is built for each inbound request and never shared, so a
    validated session cannot leak into another request.
    """

    def __init__(self, session_manager: SessionManager, cookies: Mapping[str, str]):
        self.session_manager = session_manager
        self.cookies = cookies
        self._validation: Optional[SessionValidation] = None

    @property
    def session_id(self) -> Optional[str]:
        return self.session_manager.read_session_cookie(self.cookies)

    async def validate(self) -> SessionValidation:
        if self._validation is None:
            self._validation = await self.session_manager.validate_session(self.session_id)
        return self._validation

    def forget(self) -> None:
        """Drop the memoized result, e.g. after logout or re-issuance."""
        self._validation = None
