from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request, Response, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.challenge_verifier import TurnstileChallengeVerifier
from src.adapter.services.notifier import build_notifier
from src.adapter.services.password_hasher import build_password_hasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.rendering import apply_cookies
from src.app.services.challenge_verifier import ChallengeVerifier
from src.app.services.cookies import UserPrefsCookie
from src.app.services.notifier import Notifier
from src.app.services.password_hasher import PasswordHasher
from src.app.services.policy import AuthPolicy
from src.app.services.request_guard import IncomingRequest, RequestGuard, check_origin
from src.app.services.session_manager import RequestAuthContext, SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_auth_policy() -> AuthPolicy:
    return AuthPolicy.from_config(ApplicationConfig)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return build_password_hasher(ApplicationConfig.PASSWORD_HASHER)


@lru_cache
def get_notifier() -> Notifier:
    return build_notifier(
        ApplicationConfig.EMAIL_PROVIDER,
        api_key=ApplicationConfig.RESEND_API_KEY,
        from_email=ApplicationConfig.EMAIL_FROM,
    )


@lru_cache
def get_challenge_verifier() -> Optional[ChallengeVerifier]:
    if not ApplicationConfig.TURNSTILE_ENABLED:
        return None
    return TurnstileChallengeVerifier(
        ApplicationConfig.TURNSTILE_SECRET_KEY,
        timeout=ApplicationConfig.TURNSTILE_TIMEOUT,
    )


@lru_cache
def get_user_prefs_cookie() -> UserPrefsCookie:
    return UserPrefsCookie(
        name=ApplicationConfig.USER_PREFS_COOKIE_NAME,
        max_age=ApplicationConfig.USER_PREFS_MAX_AGE,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
    )


def get_session_manager(
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: AuthPolicy = Depends(get_auth_policy),
) -> SessionManager:
    return SessionManager(
        uow,
        policy=policy,
        cookie_name=ApplicationConfig.SESSION_COOKIE_NAME,
        secure_cookie=ApplicationConfig.SESSION_COOKIE_SECURE,
    )


def get_auth_context(
    request: Request,
    session_manager: SessionManager = Depends(get_session_manager),
) -> RequestAuthContext:
    """Built once per request; FastAPI caches it for the request's other dependencies."""
    return RequestAuthContext(session_manager, dict(request.cookies))


def get_request_guard(
    context: RequestAuthContext = Depends(get_auth_context),
    user_prefs: UserPrefsCookie = Depends(get_user_prefs_cookie),
) -> RequestGuard:
    return RequestGuard(context, user_prefs=user_prefs, signin_url=ApplicationConfig.SIGNIN_URL)


def to_incoming_request(request: Request) -> IncomingRequest:
    return IncomingRequest(
        method=request.method,
        url=str(request.url),
        headers={key.lower(): value for key, value in request.headers.items()},
        cookies=dict(request.cookies),
    )


async def verify_origin(request: Request) -> None:
    """CSRF check for state-changing routes."""
    error = check_origin(to_incoming_request(request))
    if error is not None:
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)


async def get_current_user(
    response: Response,
    context: RequestAuthContext = Depends(get_auth_context),
) -> User:
    """
    Dependency resolving the user behind the session cookie.

    A session rotated during validation is re-issued on the response.

    Raises:
        ClientError: 401 if there is no valid session, 403 if the user is banned
    """
    validation = await context.validate()
    if validation.user is None:
        raise ClientError(
            Error("UNAUTHENTICATED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    if validation.user.banned:
        raise ClientError(
            Error("FORBIDDEN", "User has been banned"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    if validation.fresh:
        session_manager = context.session_manager
        apply_cookies(response, [session_manager.create_session_cookie(validation.session.id)])
    return validation.user
