from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.email_verification_code_repository import (
    EmailVerificationCodeRepository,
)
from src.adapter.repositories.oauth_account_repository import OAuthAccountRepository
from src.adapter.repositories.reset_password_token_repository import (
    ResetPasswordTokenRepository,
)
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.email_verification_codes = EmailVerificationCodeRepository(self.session)
        self.reset_password_tokens = ResetPasswordTokenRepository(self.session)
        self.oauth_accounts = OAuthAccountRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Entities loaded in the block stay readable; uncommitted writes are discarded
        self.session.expunge_all()
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
