from typing import Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.email_verification_code_repository import (
    IEmailVerificationCodeRepository,
)
from src.domain.entities import EmailVerificationCode


class EmailVerificationCodeRepository(IEmailVerificationCodeRepository):
    """EmailVerificationCode repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str, email: str) -> Optional[EmailVerificationCode]:
        stmt = select(EmailVerificationCode).where(
            EmailVerificationCode.user_id == user_id,
            EmailVerificationCode.email == email,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, code: EmailVerificationCode) -> EmailVerificationCode:
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    async def update(self, code: EmailVerificationCode) -> EmailVerificationCode:
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    async def delete(self, user_id: str, email: str) -> bool:
        stmt = delete(EmailVerificationCode).where(
            EmailVerificationCode.user_id == user_id,
            EmailVerificationCode.email == email,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_user_id(self, user_id: str) -> int:
        stmt = delete(EmailVerificationCode).where(
            EmailVerificationCode.user_id == user_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
