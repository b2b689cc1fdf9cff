import logging
from typing import Optional

from src.libs.result import Error, Result, Return

from src.app.services.codes import issue_email_verification_code
from src.app.services.emails import verification_code_email
from src.app.services.notifier import Notifier, NotifierError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.policy import AuthPolicy
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from .dtos import SessionIssued, UserInfo
from .signup_dto import SignupCommand, SignupResponse
from .validation import validate_credentials

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand
    - Output: Result[SignupResponse]

    Business Logic:
    1. Validate email shape and password length bounds
    2. Reject an email that is already registered (generic message)
    3. Hash password with the configured KDF
    4. Create User with email_verified=False
    5. Issue a verification code (replacing any prior code)
    6. Commit, then deliver the code by email
    7. On delivery failure delete the code and the user (compensation)
    8. Create a session for the new, still unverified, account
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        password_hasher: PasswordHasher,
        notifier: Notifier,
        policy: Optional[AuthPolicy] = None,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.password_hasher = password_hasher
        self.notifier = notifier
        self.policy = policy or AuthPolicy()

    async def execute(self, command: SignupCommand) -> Result[SignupResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with email, password and request base URL

        Returns:
            Result[SignupResponse] with the new session,
            or Error(VALIDATION_ERROR) / Error(DELIVERY_ERROR)
        """
        email = command.email.strip()
        validation_error = validate_credentials(email, command.password, self.policy)
        if validation_error:
            return Return.err(validation_error)

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(
                    Error(
                        "VALIDATION_ERROR",
                        "Invalid email address",
                        field="email",
                        details={"fields": {"email": "Invalid email address"}},
                    )
                )

            user = User(
                email=email,
                hashed_password=self.password_hasher.hash(command.password),
                email_verified=False,
            )
            user = await self.uow.users.create(user)

            verification_code = await issue_email_verification_code(
                self.uow, user.id, email, self.policy
            )
            await self.uow.commit()

        message = verification_code_email(
            to_email=email,
            code=verification_code.code,
            callback_url=f"{command.base_url.rstrip('/')}/verification-code",
            expires_minutes=int(
                self.policy.email_verification_code_duration.total_seconds() // 60
            ),
        )
        try:
            await self.notifier.send_email(message)
        except NotifierError:
            logger.exception("Cannot sign up %s: verification email not delivered", user.id)
            await self._rollback_signup(user.id, email)
            return Return.err(
                Error(
                    "DELIVERY_ERROR",
                    "Unexpected error, please retry in a few moments",
                )
            )

        session, cookie = await self.session_manager.create_session(user.id)

        return Return.ok(
            SignupResponse(
                status="pending_verification",
                session=SessionIssued(
                    user=UserInfo.from_user(user),
                    session_id=session.id,
                    cookie=cookie,
                ),
            )
        )

    async def _rollback_signup(self, user_id: str, email: str) -> None:
        # Both rows go in one transaction so a retry with the same email starts clean
        async with self.uow:
            await self.uow.email_verification_codes.delete(user_id, email)
            await self.uow.users.delete(user_id)
            await self.uow.commit()
