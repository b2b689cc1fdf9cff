from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.oauth_account_repository import IOAuthAccountRepository
from src.domain.entities import OAuthAccount


class OAuthAccountRepository(IOAuthAccountRepository):
    """OAuthAccount repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, provider_id: str, provider_user_id: str) -> Optional[OAuthAccount]:
        stmt = select(OAuthAccount).where(
            OAuthAccount.provider_id == provider_id,
            OAuthAccount.provider_user_id == provider_user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: OAuthAccount) -> OAuthAccount:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account
