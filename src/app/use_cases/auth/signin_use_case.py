"""
Signin Use Case

Handles password authentication and session issuance.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.policy import AuthPolicy
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SessionIssued, SigninCommand, UserInfo
from .validation import validate_credentials

# Verified against when the account is missing so both paths cost one KDF run
_DUMMY_PASSWORD = "dummy_password"


class SigninUseCase:
    """
    Use case for password sign-in.

    Business Rules:
    - Email shape and password bounds are checked before any lookup
    - Unknown email, externally-authenticated account and wrong password all
      yield the same INVALID_CREDENTIALS error
    - Password comparison is done by the KDF's verify routine
    - A new session is created on success
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
        self._dummy_hash: Optional[str] = None

    async def execute(self, command: SigninCommand) -> Result[SessionIssued]:
        """
        Execute sign-in use case.

        Args:
            command: SigninCommand with email and plain text password

        Returns:
            Result with SessionIssued, or Error

        Errors:
            - VALIDATION_ERROR: malformed email or password out of bounds
            - INVALID_CREDENTIALS: no such account or wrong password
        """
        email = command.email.strip()
        validation_error = validate_credentials(email, command.password, self.policy)
        if validation_error:
            return Return.err(validation_error)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

        if user is None or not user.hashed_password:
            self.password_hasher.verify(self._get_dummy_hash(), command.password)
            return Return.err(self._invalid_credentials())

        if not self.password_hasher.verify(user.hashed_password, command.password):
            return Return.err(self._invalid_credentials())

        session, cookie = await self.session_manager.create_session(user.id)

        return Return.ok(
            SessionIssued(
                user=UserInfo.from_user(user),
                session_id=session.id,
                cookie=cookie,
            )
        )

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash

    @staticmethod
    def _invalid_credentials() -> Error:
        return Error("INVALID_CREDENTIALS", "Invalid email or password")
