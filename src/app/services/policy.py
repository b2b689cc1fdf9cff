"""
Auth Policy

Tunable limits shared by the session manager and the auth use cases.
"""

from datetime import timedelta

from pydantic import BaseModel


class AuthPolicy(BaseModel):
    """Durations, sizes and bounds applied by the credential lifecycle"""

    session_expires_in: timedelta = timedelta(days=30)

    email_verification_code_size: int = 4
    email_verification_code_duration: timedelta = timedelta(minutes=5)
    email_verification_max_retry: int = 2

    reset_password_duration: timedelta = timedelta(minutes=60)

    password_min_length: int = 8
    password_max_length: int = 255

    @property
    def session_renewal_window(self) -> timedelta:
        return self.session_expires_in / 2

    @classmethod
    def from_config(cls, config) -> "AuthPolicy":
        return cls(
            session_expires_in=timedelta(days=config.SESSION_EXPIRES_DAYS),
            email_verification_code_size=config.EMAIL_VERIFICATION_CODE_SIZE,
            email_verification_code_duration=timedelta(
                minutes=config.EMAIL_VERIFICATION_CODE_DURATION_MINUTES
            ),
            email_verification_max_retry=config.EMAIL_VERIFICATION_MAX_RETRY,
            reset_password_duration=timedelta(
                minutes=config.RESET_PASSWORD_DURATION_MINUTES
            ),
            password_min_length=config.PASSWORD_MIN_LENGTH,
            password_max_length=config.PASSWORD_MAX_LENGTH,
        )
