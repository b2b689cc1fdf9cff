from typing import Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.reset_password_token_repository import (
    IResetPasswordTokenRepository,
)
from src.domain.entities import ResetPasswordToken


class ResetPasswordTokenRepository(IResetPasswordTokenRepository):
    """ResetPasswordToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, token_id: str) -> Optional[ResetPasswordToken]:
        """Get reset token by ID"""
        stmt = select(ResetPasswordToken).where(ResetPasswordToken.id == token_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, token: ResetPasswordToken) -> ResetPasswordToken:
        """Create a new reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def delete_by_id(self, token_id: str) -> bool:
        """Delete a reset token by ID"""
        stmt = delete(ResetPasswordToken).where(ResetPasswordToken.id == token_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_user_id(self, user_id: str) -> int:
        """Delete all reset tokens for a user"""
        stmt = delete(ResetPasswordToken).where(ResetPasswordToken.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
