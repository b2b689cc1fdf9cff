"""
ResetPasswordToken Entity

Single-use token authorizing a password change.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import generate_uuid


class ResetPasswordToken(SQLModel, table=True):
    """
    ResetPasswordToken entity.

    Business Rules:
    - id is a random UUID and doubles as the public link component
    - At most one live token per user
    - Expires 60 minutes after issuance
    - Deleted in the same transaction as the password update
    """

    __tablename__ = "reset_password"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
