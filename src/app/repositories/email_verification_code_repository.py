from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import EmailVerificationCode


class IEmailVerificationCodeRepository(ABC):
    """EmailVerificationCode repository interface - application layer"""

    @abstractmethod
    async def get(self, user_id: str, email: str) -> Optional[EmailVerificationCode]:
        """Get the live code for (user_id, email)"""
        pass

    @abstractmethod
    async def create(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Create a new verification code"""
        pass

    @abstractmethod
    async def update(self, code: EmailVerificationCode) -> EmailVerificationCode:
        """Update existing verification code"""
        pass

    @abstractmethod
    async def delete(self, user_id: str, email: str) -> bool:
        """Delete the code for (user_id, email)"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: str) -> int:
        """Delete every code belonging to a user"""
        pass
