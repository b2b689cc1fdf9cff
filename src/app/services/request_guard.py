"""
Request Guard

Origin check (CSRF) plus session resolution for protected requests.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from src.app.services.cookies import CookieDirective, UserPrefsCookie
from src.app.services.outcomes import Authenticated, Denied, FlowOutcome, Redirect
from src.app.services.session_manager import RequestAuthContext
from src.libs.result import Error

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


@dataclass
class IncomingRequest:
    """The parts of an HTTP request the guard looks at.

    Header names are expected in lowercase.
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)

    @property
    def origin(self) -> Optional[str]:
        return self.headers.get("origin")

    @property
    def host(self) -> Optional[str]:
        return self.headers.get("host") or self.headers.get("x-forwarded-host")


def _host_of(url: str) -> Optional[str]:
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    return parts.netloc.lower() or None


def verify_request_origin(origin: Optional[str], allowed_hosts: Iterable[str]) -> bool:
    """True when the Origin header names one of the allowed hosts."""
    if not origin:
        return False
    origin_host = _host_of(origin)
    if origin_host is None:
        return False
    for allowed in allowed_hosts:
        if allowed and _host_of(f"https://{allowed}") == origin_host:
            return True
    return False


def check_origin(request: IncomingRequest) -> Optional[Error]:
    """Origin check for state-changing methods. Returns an Error on failure."""
    if request.method.upper() in SAFE_METHODS:
        return None
    host = request.host
    if not host or not verify_request_origin(request.origin, [host]):
        logger.warning(
            "Rejected %s %s: origin %r does not match host %r",
            request.method,
            request.url,
            request.origin,
            host,
        )
        return Error("FORBIDDEN_ORIGIN", "Request origin is not allowed")
    return None


class RequestGuard:
    """
    Resolves the authenticated user for a protected request.

    Outcomes:
    - Denied(403) when the origin check fails or the user is banned
    - Redirect to sign-in when no session cookie is present, remembering the
      requested URL in the preference cookie
    - Redirect to the remembered (or requested) URL when the session is
      stale (cookie cleared) or was just rotated (cookie re-issued)
    - Authenticated otherwise
    """

    def __init__(
        self,
        context: RequestAuthContext,
        user_prefs: Optional[UserPrefsCookie] = None,
        signin_url: str = "/signin",
    ):
        self.context = context
        self.user_prefs = user_prefs or UserPrefsCookie()
        self.signin_url = signin_url

    async def validate_request(self, request: IncomingRequest) -> FlowOutcome:
        origin_error = check_origin(request)
        if origin_error is not None:
            return Denied(status_code=403, error=origin_error)

        session_manager = self.context.session_manager
        if not self.context.session_id:
            return Redirect(
                url=self.signin_url,
                cookies=[self.user_prefs.remember_redirect(request.cookies, request.url)],
            )

        remembered = self.user_prefs.redirect_url(request.cookies)
        redirect_url = remembered or request.url

        validation = await self.context.validate()
        if validation.session is None:
            cookies: List[CookieDirective] = [session_manager.create_blank_session_cookie()]
            if remembered:
                cookies.append(self.user_prefs.clear_redirect(request.cookies))
            return Redirect(url=redirect_url, cookies=cookies)

        if validation.fresh:
            cookies = [session_manager.create_session_cookie(validation.session.id)]
            if remembered:
                cookies.append(self.user_prefs.clear_redirect(request.cookies))
            return Redirect(url=redirect_url, cookies=cookies)

        if validation.user.banned:
            logger.warning("Denied request from banned user %s", validation.user.id)
            return Denied(status_code=403, error=Error("FORBIDDEN", "User has been banned"))

        return Authenticated(user=validation.user, session=validation.session)
