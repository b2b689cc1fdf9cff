from abc import ABC, abstractmethod

from src.app.repositories.email_verification_code_repository import (
    IEmailVerificationCodeRepository,
)
from src.app.repositories.oauth_account_repository import IOAuthAccountRepository
from src.app.repositories.reset_password_token_repository import (
    IResetPasswordTokenRepository,
)
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management

    Everything written between entering the context and ``commit`` is applied
    all-or-nothing; leaving the context without committing rolls back.
    """

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    sessions: ISessionRepository
    email_verification_codes: IEmailVerificationCodeRepository
    reset_password_tokens: IResetPasswordTokenRepository
    oauth_accounts: IOAuthAccountRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
