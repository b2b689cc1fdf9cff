from fastapi import APIRouter, Depends, Request

from src.api.rendering import to_response
from src.app.services.request_guard import RequestGuard
from src.app.use_cases.auth import UserInfo
from src.depends import get_current_user, get_request_guard, to_incoming_request
from src.domain.entities import User

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/me", response_model=UserInfo)
async def me(current_user: User = Depends(get_current_user)):
    """
    Current User

    Raises:
        - 401 Unauthorized: no valid session
        - 403 Forbidden: banned account
    """
    return UserInfo.from_user(current_user)


@router.get("/profile", response_model=UserInfo)
async def profile(request: Request, guard: RequestGuard = Depends(get_request_guard)):
    """
    Guarded Profile Page

    Unauthenticated visitors are redirected to sign-in with the requested
    URL remembered; rotated sessions are re-issued through a redirect.
    """
    outcome = await guard.validate_request(to_incoming_request(request))
    response = to_response(outcome)
    if response is not None:
        return response
    return UserInfo.from_user(outcome.user)
