from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import OAuthAccount


class IOAuthAccountRepository(ABC):
    """OAuthAccount repository interface - application layer"""

    @abstractmethod
    async def get(self, provider_id: str, provider_user_id: str) -> Optional[OAuthAccount]:
        """Get the link for an external identity"""
        pass

    @abstractmethod
    async def create(self, account: OAuthAccount) -> OAuthAccount:
        """Link an external identity to a user"""
        pass
