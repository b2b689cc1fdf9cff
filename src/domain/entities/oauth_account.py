"""
OAuthAccount Entity

Links an external identity to a local user.
"""

from sqlmodel import Field, SQLModel


class OAuthAccount(SQLModel, table=True):
    """OAuthAccount entity - (provider_id, provider_user_id) -> user_id"""

    __tablename__ = "oauth_account"

    provider_id: str = Field(primary_key=True, max_length=64)
    provider_user_id: str = Field(primary_key=True, max_length=255)
    user_id: str = Field(foreign_key="user.id", nullable=False, index=True)
