"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth flows.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.app.services.cookies import CookieDirective
from src.domain.entities import AccountState, User


# ============================================================================
# Command DTOs
# ============================================================================


class SigninCommand(BaseModel):
    """Credentials submitted on the sign-in form"""

    email: str
    password: str


class ForgotPasswordCommand(BaseModel):
    """Password reset request"""

    email: str
    base_url: str
    challenge_token: Optional[str] = None
    client_ip: Optional[str] = None


class ResetPasswordCommand(BaseModel):
    """New password submitted through a reset link"""

    token: Optional[str] = None
    password: str
    password_confirmation: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Authenticated user view"""

    id: str
    email: str
    email_verified: bool
    state: AccountState
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=user.id,
            email=user.email,
            email_verified=user.email_verified,
            state=user.state,
            username=user.username,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
        )


class SessionIssued(BaseModel):
    """A newly minted session and the cookie that carries it"""

    user: UserInfo
    session_id: str
    cookie: CookieDirective


class VerifyEmailResponse(BaseModel):
    """Response for email verification use case"""

    status: str
    message: str
    session: Optional[SessionIssued] = None


class ResendVerificationResponse(BaseModel):
    """Response for resend verification code use case"""

    status: str
    message: str


class ForgotPasswordResponse(BaseModel):
    """Response for forgot password use case"""

    status: str
    message: str


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    logged_out: bool
    cookie: Optional[CookieDirective] = None
