"""
User Entity

Represents a person who can sign in with a password or an external identity.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import generate_uuid, utcnow

from .enums import AccountState


class User(SQLModel, table=True):
    """
    User entity - an account that owns sessions, codes and reset tokens.

    Business Rules:
    - Email must be unique across all users
    - email_verified only ever flips from False to True
    - hashed_password is absent for externally-authenticated accounts
    - hashed_password is replaced on password reset, never stored in clear
    """

    __tablename__ = "user"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    email: str = Field(unique=True, index=True, max_length=255)
    email_verified: bool = Field(default=False)
    hashed_password: Optional[str] = Field(default=None, max_length=255)

    username: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=2048)
    banned: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    @property
    def state(self) -> AccountState:
        if self.email_verified:
            return AccountState.verified
        return AccountState.pending_verification
