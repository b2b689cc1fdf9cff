"""
Turns flow outcomes and cookie directives into HTTP responses.
"""

from typing import Iterable, Optional

from fastapi import Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from src.api.error import ClientError
from src.app.services.cookies import CookieDirective
from src.app.services.outcomes import Authenticated, Denied, FlowOutcome, Redirect, Rendered
from src.libs.result import Error


def apply_cookies(response: Response, cookies: Iterable[CookieDirective]) -> Response:
    for cookie in cookies:
        response.set_cookie(
            key=cookie.name,
            value=cookie.value,
            max_age=cookie.max_age,
            path=cookie.path,
            secure=cookie.secure,
            httponly=cookie.http_only,
            samesite=cookie.same_site,
        )
    return response


def redirect(
    url: str,
    cookies: Iterable[CookieDirective] = (),
    status_code: int = status.HTTP_302_FOUND,
) -> RedirectResponse:
    return apply_cookies(RedirectResponse(url, status_code=status_code), cookies)


def render(
    body: dict,
    cookies: Iterable[CookieDirective] = (),
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return apply_cookies(JSONResponse(status_code=status_code, content=body), cookies)


def render_error(
    error: Error,
    status_code: int = status.HTTP_200_OK,
    cookies: Iterable[CookieDirective] = (),
) -> JSONResponse:
    """Form-level failure: the caller re-renders with the error attached."""
    return render({"error": error.to_dict()}, cookies=cookies, status_code=status_code)


def to_response(outcome: FlowOutcome) -> Optional[Response]:
    """Build the response for a non-authenticated outcome.

    Returns None for Authenticated so the route can carry on.

    Raises:
        ClientError: for Denied outcomes
    """
    if isinstance(outcome, Authenticated):
        return None
    if isinstance(outcome, Redirect):
        return redirect(outcome.url, outcome.cookies, status_code=outcome.status_code)
    if isinstance(outcome, Rendered):
        return render(outcome.body, outcome.cookies, status_code=outcome.status_code)
    if isinstance(outcome, Denied):
        error = outcome.error or Error("FORBIDDEN", "Forbidden")
        raise ClientError(error, status_code=outcome.status_code)
    raise TypeError(f"Unknown outcome {outcome!r}")
