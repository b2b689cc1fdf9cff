"""
Resend Verification Code Use Case

Issues and delivers a new code to the current unverified user.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.codes import issue_email_verification_code
from src.app.services.emails import verification_code_email
from src.app.services.notifier import Notifier, NotifierError
from src.app.services.policy import AuthPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from .dtos import ResendVerificationResponse

logger = logging.getLogger(__name__)


class ResendVerificationCodeUseCase:
    """
    Use case for resending the email verification code.

    Business Rules:
    - Already verified users get success and no email
    - Any prior code is deleted before the new one is stored
    - New code gets a fresh expiry and a reset retry counter
    - If delivery fails the new code is deleted and DELIVERY_ERROR returned
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Notifier,
        policy: Optional[AuthPolicy] = None,
    ):
        self.uow = uow
        self.notifier = notifier
        self.policy = policy or AuthPolicy()

    async def execute(self, user: User, base_url: str) -> Result[ResendVerificationResponse]:
        if user.email_verified:
            return Return.ok(
                ResendVerificationResponse(
                    status="already_verified",
                    message="Email is already verified",
                )
            )

        async with self.uow:
            verification_code = await issue_email_verification_code(
                self.uow, user.id, user.email, self.policy
            )
            await self.uow.commit()

        message = verification_code_email(
            to_email=user.email,
            code=verification_code.code,
            callback_url=f"{base_url.rstrip('/')}/verification-code",
            expires_minutes=int(
                self.policy.email_verification_code_duration.total_seconds() // 60
            ),
        )
        try:
            await self.notifier.send_email(message)
        except NotifierError:
            logger.exception("Verification code not delivered to user %s", user.id)
            async with self.uow:
                await self.uow.email_verification_codes.delete(user.id, user.email)
                await self.uow.commit()
            return Return.err(
                Error(
                    "DELIVERY_ERROR",
                    "Unexpected error, please retry in a few moments",
                )
            )

        return Return.ok(
            ResendVerificationResponse(
                status="sent",
                message=f"A new code has been sent to '{user.email}'",
            )
        )
