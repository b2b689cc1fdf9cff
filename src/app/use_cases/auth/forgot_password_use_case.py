"""
Forgot Password Use Case

Issues a reset token and emails the reset link.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.challenge_verifier import ChallengeVerifier, ChallengeVerifierError
from src.app.services.codes import issue_reset_password_token
from src.app.services.emails import reset_password_email
from src.app.services.notifier import Notifier, NotifierError
from src.app.services.policy import AuthPolicy
from src.app.services.unit_of_work import UnitOfWork
from .dtos import ForgotPasswordCommand, ForgotPasswordResponse

logger = logging.getLogger(__name__)


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset link.

    Business Rules:
    - When a challenge verifier is configured the challenge token must pass
      before anything is looked up
    - Unknown and unverified emails get the same INVALID_EMAIL error
    - Any prior reset token of the user is deleted first
    - Token expires 60 minutes after issuance
    - If delivery fails the token is deleted and DELIVERY_ERROR returned
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Notifier,
        challenge_verifier: Optional[ChallengeVerifier] = None,
        policy: Optional[AuthPolicy] = None,
    ):
        self.uow = uow
        self.notifier = notifier
        self.challenge_verifier = challenge_verifier
        self.policy = policy or AuthPolicy()

    async def execute(self, command: ForgotPasswordCommand) -> Result[ForgotPasswordResponse]:
        """
        Execute forgot password use case.

        Errors:
            - CHALLENGE_FAILED: bot challenge rejected or unreachable
            - INVALID_EMAIL: no verified account for this email
            - DELIVERY_ERROR: reset email could not be sent
        """
        if self.challenge_verifier is not None:
            if not await self._challenge_passed(command):
                return Return.err(
                    Error("CHALLENGE_FAILED", "Challenge verification failed, please retry")
                )

        email = command.email.strip()

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None or not user.email_verified:
                return Return.err(
                    Error("INVALID_EMAIL", "Invalid email", field="email")
                )

            reset_token = await issue_reset_password_token(self.uow, user.id, self.policy)
            await self.uow.commit()

        reset_url = f"{command.base_url.rstrip('/')}/reset-password/{reset_token.id}"
        try:
            await self.notifier.send_email(
                reset_password_email(to_email=user.email, reset_url=reset_url)
            )
        except NotifierError:
            logger.exception("Cannot send reset password link to user %s", user.id)
            async with self.uow:
                await self.uow.reset_password_tokens.delete_by_id(reset_token.id)
                await self.uow.commit()
            return Return.err(
                Error(
                    "DELIVERY_ERROR",
                    "Unexpected error, please retry in a few moments",
                    field="email",
                )
            )

        return Return.ok(
            ForgotPasswordResponse(
                status="sent",
                message=f"An email has been sent to '{user.email}'",
            )
        )

    async def _challenge_passed(self, command: ForgotPasswordCommand) -> bool:
        try:
            return await self.challenge_verifier.verify(
                command.challenge_token, command.client_ip
            )
        except ChallengeVerifierError:
            logger.warning("Challenge verification unavailable", exc_info=True)
            return False
