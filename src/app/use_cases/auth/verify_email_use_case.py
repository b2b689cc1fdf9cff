"""
Verify Email Use Case

Confirms email ownership with the emailed numeric code.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.policy import AuthPolicy
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import User
from .dtos import SessionIssued, UserInfo, VerifyEmailResponse

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Caller is an authenticated user; verified users short-circuit to success
    - Code must have exactly the configured number of digits
    - Missing code -> CODE_NOT_FOUND
    - Expired code -> CODE_EXPIRED, code deleted
    - Mismatch while retry < max -> retry incremented, CODE_MISMATCH
    - Mismatch once retry reached max -> RETRY_EXHAUSTED, code deleted
    - On match: every session of the user is invalidated, then
      email_verified=True and the code deletion commit together, then a
      fresh session is issued
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        policy: Optional[AuthPolicy] = None,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.policy = policy or AuthPolicy()

    async def execute(self, user: User, code: str) -> Result[VerifyEmailResponse]:
        """
        Execute email verification use case.

        Args:
            user: The authenticated user submitting the code
            code: Submitted code

        Returns:
            Result with verification status and the new session, or Error

        Errors:
            - INVALID_CODE_FORMAT: code is not the expected number of digits
            - CODE_NOT_FOUND, CODE_EXPIRED, CODE_MISMATCH, RETRY_EXHAUSTED
        """
        if user.email_verified:
            return Return.ok(
                VerifyEmailResponse(
                    status="verified",
                    message="Email is already verified",
                )
            )

        code = (code or "").strip()
        if len(code) != self.policy.email_verification_code_size or not code.isdigit():
            return Return.err(
                Error("INVALID_CODE_FORMAT", "Verification code is malformed")
            )

        max_retry = self.policy.email_verification_max_retry

        async with self.uow:
            verification_code = await self.uow.email_verification_codes.get(
                user.id, user.email
            )

            if verification_code is None:
                return Return.err(
                    Error(
                        "CODE_NOT_FOUND",
                        "Validation code not found.",
                        details={"resend_code": True},
                    )
                )

            if verification_code.expires_at < utcnow():
                await self.uow.email_verification_codes.delete(user.id, user.email)
                await self.uow.commit()
                return Return.err(
                    Error(
                        "CODE_EXPIRED",
                        "Verification code has expired, please ask for a new code.",
                        details={"resend_code": True},
                    )
                )

            if verification_code.code != code:
                retry = verification_code.retry or 0
                if retry >= max_retry:
                    await self.uow.email_verification_codes.delete(user.id, user.email)
                    await self.uow.commit()
                    logger.info("Verification code exhausted for user %s", user.id)
                    return Return.err(
                        Error(
                            "RETRY_EXHAUSTED",
                            "Maximum retries reached. Please ask for a new code.",
                            details={"resend_code": True},
                        )
                    )

                verification_code.retry = retry + 1
                await self.uow.email_verification_codes.update(verification_code)
                await self.uow.commit()

                retries_left = max_retry - verification_code.retry
                return Return.err(
                    Error(
                        "CODE_MISMATCH",
                        f"Validation code mismatched ({retries_left} retries left). "
                        "Please retry or ask for a new code.",
                        details={"resend_code": True, "retries_left": retries_left},
                    )
                )

        await self.session_manager.invalidate_user_sessions(user.id)

        async with self.uow:
            stored_user = await self.uow.users.get_by_id(user.id)
            if stored_user is None:
                return Return.err(Error("UNAUTHENTICATED", "User no longer exists"))
            stored_user.email_verified = True
            await self.uow.users.update(stored_user)
            await self.uow.email_verification_codes.delete(user.id, user.email)
            await self.uow.commit()

        session, cookie = await self.session_manager.create_session(user.id)

        return Return.ok(
            VerifyEmailResponse(
                status="verified",
                message="Email successfully verified",
                session=SessionIssued(
                    user=UserInfo.from_user(stored_user),
                    session_id=session.id,
                    cookie=cookie,
                ),
            )
        )
