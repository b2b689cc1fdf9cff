"""
Auth Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from .enums import AccountState, OAuthProvider

from .user import User
from .session import Session
from .email_verification_code import EmailVerificationCode
from .reset_password_token import ResetPasswordToken
from .oauth_account import OAuthAccount

__all__ = [
    # Enums
    "AccountState",
    "OAuthProvider",
    # Entities
    "User",
    "Session",
    "EmailVerificationCode",
    "ResetPasswordToken",
    "OAuthAccount",
]
