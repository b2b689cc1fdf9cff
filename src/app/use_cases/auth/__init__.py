"""
Authentication Use Cases

All credential lifecycle business logic.
"""

from .signup_use_case import SignupUseCase
from .signup_dto import SignupCommand, SignupResponse
from .signin_use_case import SigninUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationCodeUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .logout_use_case import LogoutUseCase
from .dtos import (
    SigninCommand,
    ForgotPasswordCommand,
    ResetPasswordCommand,
    UserInfo,
    SessionIssued,
    VerifyEmailResponse,
    ResendVerificationResponse,
    ForgotPasswordResponse,
    LogoutResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "SigninUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationCodeUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    "LogoutUseCase",
    # DTOs - Commands
    "SignupCommand",
    "SigninCommand",
    "ForgotPasswordCommand",
    "ResetPasswordCommand",
    # DTOs - Responses
    "SignupResponse",
    "SessionIssued",
    "VerifyEmailResponse",
    "ResendVerificationResponse",
    "ForgotPasswordResponse",
    "LogoutResponse",
    # DTOs - Nested Models
    "UserInfo",
]
