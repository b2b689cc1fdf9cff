"""
Use Cases

Organized by domain folder:
- auth/: Credential lifecycle flows (sign-up, sign-in, verification,
  password reset, logout)

Import from subdirectories for better organization.
"""

from .auth import (
    SignupUseCase,
    SigninUseCase,
    VerifyEmailUseCase,
    ResendVerificationCodeUseCase,
    ForgotPasswordUseCase,
    ResetPasswordUseCase,
    LogoutUseCase,
)

__all__ = [
    "SignupUseCase",
    "SigninUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationCodeUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    "LogoutUseCase",
]
