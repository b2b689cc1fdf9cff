"""
Reset Password Use Case

Consumes a reset token and replaces the user's password.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.policy import AuthPolicy
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import ResetPasswordCommand, SessionIssued, UserInfo
from .validation import password_error


class ResetPasswordUseCase:
    """
    Use case for resetting a password with an emailed token.

    Business Rules:
    - Token must be present and both password fields must match
    - New password must respect the length bounds
    - Token must exist and not be expired; expired tokens leave the
      password untouched
    - Every session of the user is invalidated, then the password update
      and the token deletion commit together
    - A fresh session is issued for the user
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        password_hasher: PasswordHasher,
        policy: Optional[AuthPolicy] = None,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.password_hasher = password_hasher
        self.policy = policy or AuthPolicy()

    async def execute(self, command: ResetPasswordCommand) -> Result[SessionIssued]:
        """
        Execute reset password use case.

        Errors:
            - MISSING_TOKEN: no token in the link
            - CONFIRMATION_MISMATCH: passwords differ
            - VALIDATION_ERROR: password out of bounds
            - TOKEN_NOT_FOUND: unknown or already used token
            - TOKEN_EXPIRED: token past its expiry
        """
        if not command.token:
            return Return.err(
                Error(
                    "MISSING_TOKEN",
                    "Missing token, please double check the link url sent by email.",
                )
            )

        if command.password != command.password_confirmation:
            return Return.err(
                Error("CONFIRMATION_MISMATCH", "Confirmation password mismatch.")
            )

        message = password_error(command.password, self.policy)
        if message:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    message,
                    field="password",
                    details={"fields": {"password": message}},
                )
            )

        async with self.uow:
            reset_token = await self.uow.reset_password_tokens.get_by_id(command.token)

        if reset_token is None:
            return Return.err(
                Error(
                    "TOKEN_NOT_FOUND",
                    "Token not found, please double check the link url sent by email.",
                )
            )

        if reset_token.expires_at < utcnow():
            return Return.err(
                Error(
                    "TOKEN_EXPIRED",
                    "Token expired, please submit a new request.",
                    details={"expired": True},
                )
            )

        hashed_password = self.password_hasher.hash(command.password)

        await self.session_manager.invalidate_user_sessions(reset_token.user_id)

        async with self.uow:
            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None:
                return Return.err(
                    Error(
                        "TOKEN_NOT_FOUND",
                        "Token not found, please double check the link url sent by email.",
                    )
                )
            user.hashed_password = hashed_password
            await self.uow.users.update(user)
            await self.uow.reset_password_tokens.delete_by_id(reset_token.id)
            await self.uow.commit()

        session, cookie = await self.session_manager.create_session(user.id)

        return Return.ok(
            SessionIssued(
                user=UserInfo.from_user(user),
                session_id=session.id,
                cookie=cookie,
            )
        )
