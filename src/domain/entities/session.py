"""
Session Entity

Server-side record behind the session bearer cookie.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_id_from_entropy


class Session(SQLModel, table=True):
    """
    Session entity - opaque bearer token bound to a user.

    Business Rules:
    - id is the cookie value, generated from 25 random bytes
    - Expires 30 days after issuance, enforced server-side
    - Rotated (new id, new expiry) when inside the renewal window
    - Hard-deleted on logout, password reset and email verification
    """

    __tablename__ = "session"

    id: str = Field(default_factory=generate_id_from_entropy, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)
