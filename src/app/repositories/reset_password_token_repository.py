from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import ResetPasswordToken


class IResetPasswordTokenRepository(ABC):
    """ResetPasswordToken repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, token_id: str) -> Optional[ResetPasswordToken]:
        """Get reset token by its public identifier"""
        pass

    @abstractmethod
    async def create(self, token: ResetPasswordToken) -> ResetPasswordToken:
        """Create a new reset token"""
        pass

    @abstractmethod
    async def delete_by_id(self, token_id: str) -> bool:
        """Delete a reset token"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: str) -> int:
        """Delete every reset token belonging to a user"""
        pass
