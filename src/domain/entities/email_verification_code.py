"""
EmailVerificationCode Entity

One-time numeric code proving ownership of an email address.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel


class EmailVerificationCode(SQLModel, table=True):
    """
    EmailVerificationCode entity - keyed by (user_id, email).

    Business Rules:
    - At most one live code per user (user_id is unique)
    - Expires 5 minutes after issuance
    - retry counts mismatched submissions, starts unset
    - Deleted on success, on expiry when touched, or once retries run out
    """

    __tablename__ = "email_verification_code"

    user_id: str = Field(foreign_key="user.id", primary_key=True, unique=True)
    email: str = Field(primary_key=True, max_length=255)
    code: str = Field(max_length=16)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    retry: Optional[int] = Field(default=None)
