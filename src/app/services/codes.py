"""
Verification codes and reset tokens.

Both are issued through the caller's unit of work; the caller commits.
"""

import secrets
import uuid

from src.app.services.policy import AuthPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import EmailVerificationCode, ResetPasswordToken


def generate_random_code(size: int = 4) -> str:
    """Numeric code of ``size`` digits, each drawn uniformly from 1-9."""
    return "".join(str(secrets.randbelow(9) + 1) for _ in range(size))


def generate_reset_token() -> str:
    return str(uuid.uuid4())


async def issue_email_verification_code(
    uow: UnitOfWork, user_id: str, email: str, policy: AuthPolicy
) -> EmailVerificationCode:
    """Replace any code the user holds with a fresh one."""
    await uow.email_verification_codes.delete_by_user_id(user_id)

    code = EmailVerificationCode(
        user_id=user_id,
        email=email,
        code=generate_random_code(policy.email_verification_code_size),
        expires_at=utcnow() + policy.email_verification_code_duration,
    )
    return await uow.email_verification_codes.create(code)


async def issue_reset_password_token(
    uow: UnitOfWork, user_id: str, policy: AuthPolicy
) -> ResetPasswordToken:
    """Replace any reset token the user holds with a fresh one."""
    await uow.reset_password_tokens.delete_by_user_id(user_id)

    token = ResetPasswordToken(
        id=generate_reset_token(),
        user_id=user_id,
        expires_at=utcnow() + policy.reset_password_duration,
    )
    return await uow.reset_password_tokens.create(token)
