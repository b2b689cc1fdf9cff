from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.rendering import redirect, render, render_error, to_response
from src.app.services.challenge_verifier import ChallengeVerifier
from src.app.services.cookies import UserPrefsCookie
from src.app.services.notifier import Notifier
from src.app.services.outcomes import Redirect, Rendered
from src.app.services.password_hasher import PasswordHasher
from src.app.services.policy import AuthPolicy
from src.app.services.request_guard import RequestGuard
from src.app.services.session_manager import (
    RequestAuthContext,
    SessionManager,
    SessionValidation,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ForgotPasswordCommand,
    ForgotPasswordUseCase,
    LogoutUseCase,
    ResendVerificationCodeUseCase,
    ResetPasswordCommand,
    ResetPasswordUseCase,
    SigninCommand,
    SigninUseCase,
    SignupCommand,
    SignupUseCase,
    VerifyEmailUseCase,
)
from src.depends import (
    get_auth_context,
    get_auth_policy,
    get_challenge_verifier,
    get_notifier,
    get_password_hasher,
    get_request_guard,
    get_session_manager,
    get_unit_of_work,
    get_user_prefs_cookie,
    to_incoming_request,
    verify_origin,
)
from src.libs.result import Error

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Form-level failures that re-render with 200 instead of raising
FORM_ERROR_CODES = {
    "VALIDATION_ERROR",
    "INVALID_CREDENTIALS",
    "INVALID_EMAIL",
    "CODE_NOT_FOUND",
    "CODE_EXPIRED",
    "CODE_MISMATCH",
    "RETRY_EXHAUSTED",
    "TOKEN_NOT_FOUND",
    "TOKEN_EXPIRED",
    "MISSING_TOKEN",
    "CONFIRMATION_MISMATCH",
    "DELIVERY_ERROR",
    "CHALLENGE_FAILED",
}


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("cf-connecting-ip") or request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _form_error(error: Error):
    if error.code in FORM_ERROR_CODES:
        return render_error(error)
    raise ServerError(error)


async def _guest_page(context: RequestAuthContext, authenticated_redirect: str):
    """
    Shared loader for pages only guests should see.

    Authenticated users are sent away with 307; a stale session cookie is
    cleared and a rotated one re-issued.
    """
    validation = await context.validate()
    if validation.user:
        return to_response(
            Redirect(
                authenticated_redirect,
                status_code=status.HTTP_307_TEMPORARY_REDIRECT,
                cookies=_reissued_cookies(context, validation),
            )
        )

    cookies = []
    if context.session_id:
        cookies.append(context.session_manager.create_blank_session_cookie())
    return to_response(Rendered({"status": "ok"}, cookies=cookies))


def _reissued_cookies(context: RequestAuthContext, validation: SessionValidation):
    if not validation.fresh:
        return []
    return [context.session_manager.create_session_cookie(validation.session.id)]


# ============================================================================
# Sign up
# ============================================================================


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Shape checks are left to the use case so failures come back field by field.
    """

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password (8-255 chars)")


@router.get("/signup")
async def signup_page(context: RequestAuthContext = Depends(get_auth_context)):
    return await _guest_page(context, ApplicationConfig.VERIFY_EMAIL_URL)


@router.post("/signup", dependencies=[Depends(verify_origin)])
async def signup(
    payload: SignupRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    notifier: Notifier = Depends(get_notifier),
    policy: AuthPolicy = Depends(get_auth_policy),
):
    """
    User Signup

    Creates an unverified account, emails a verification code and signs the
    user in.

    Returns:
        - 302 Found to the verification page with the session cookie
        - 200 OK with an error body on validation or delivery failure
    """
    command = SignupCommand(
        email=payload.email, password=payload.password, base_url=_base_url(request)
    )
    use_case = SignupUseCase(uow, session_manager, password_hasher, notifier, policy)
    result = await use_case.execute(command)

    if result.is_err():
        return _form_error(result.error)

    return redirect(ApplicationConfig.VERIFY_EMAIL_URL, [result.value.session.cookie])


# ============================================================================
# Sign in
# ============================================================================


class SigninRequest(BaseModel):
    """Signin HTTP request payload"""

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.get("/signin")
async def signin_page(context: RequestAuthContext = Depends(get_auth_context)):
    return await _guest_page(context, ApplicationConfig.DEFAULT_REDIRECT_URL)


@router.post("/signin", dependencies=[Depends(verify_origin)])
async def signin(
    payload: SigninRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    policy: AuthPolicy = Depends(get_auth_policy),
    user_prefs: UserPrefsCookie = Depends(get_user_prefs_cookie),
):
    """
    User Signin

    Returns:
        - 302 Found to the URL remembered before sign-in (or the default)
        - 200 OK with an error body on invalid input or credentials
    """
    use_case = SigninUseCase(uow, session_manager, password_hasher, policy)
    result = await use_case.execute(
        SigninCommand(email=payload.email, password=payload.password)
    )

    if result.is_err():
        return _form_error(result.error)

    cookies = [result.value.cookie]
    remembered = user_prefs.redirect_url(request.cookies)
    if remembered:
        cookies.append(user_prefs.clear_redirect(request.cookies))

    return redirect(remembered or ApplicationConfig.DEFAULT_REDIRECT_URL, cookies)


# ============================================================================
# Email verification
# ============================================================================


class VerifyEmailRequest(BaseModel):
    """
    Verify email HTTP request payload

    Either a code submission or a request for a new code. The code comes
    whole, or one digit per input as code-1..code-4.
    """

    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = Field(None, description="Verification code from the email")
    code_1: Optional[str] = Field(None, alias="code-1")
    code_2: Optional[str] = Field(None, alias="code-2")
    code_3: Optional[str] = Field(None, alias="code-3")
    code_4: Optional[str] = Field(None, alias="code-4")
    resend: bool = Field(False, description="Ask for a new code instead")

    def submitted_code(self) -> str:
        if self.code:
            return self.code
        digits = (self.code_1, self.code_2, self.code_3, self.code_4)
        return "".join(digit or "" for digit in digits)


@router.get("/verify-email-address")
async def verify_email_page(context: RequestAuthContext = Depends(get_auth_context)):
    validation = await context.validate()
    cookies = _reissued_cookies(context, validation)
    if validation.user and validation.user.email_verified:
        return to_response(
            Redirect(
                ApplicationConfig.DEFAULT_REDIRECT_URL,
                status_code=status.HTTP_307_TEMPORARY_REDIRECT,
                cookies=cookies,
            )
        )
    return to_response(Rendered({"status": "ok"}, cookies=cookies))


@router.post("/verify-email-address")
async def verify_email(
    payload: VerifyEmailRequest,
    request: Request,
    guard: RequestGuard = Depends(get_request_guard),
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    notifier: Notifier = Depends(get_notifier),
    policy: AuthPolicy = Depends(get_auth_policy),
):
    """
    Email Verification

    Requires an authenticated (possibly unverified) user.

    Returns:
        - 302 Found to the default page with a new session cookie on success
        - 200 OK with an error body on mismatch, expiry or exhausted retries
        - 400 Bad Request on a malformed code
        - 403 Forbidden on origin check failure or banned account
    """
    outcome = await guard.validate_request(to_incoming_request(request))
    response = to_response(outcome)
    if response is not None:
        return response
    user = outcome.user

    if user.email_verified:
        return redirect(ApplicationConfig.DEFAULT_REDIRECT_URL)

    if payload.resend:
        resend_use_case = ResendVerificationCodeUseCase(uow, notifier, policy)
        result = await resend_use_case.execute(user, _base_url(request))
        if result.is_err():
            return _form_error(result.error)
        return render(result.value.model_dump())

    use_case = VerifyEmailUseCase(uow, session_manager, policy)
    result = await use_case.execute(user, payload.submitted_code())

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CODE_FORMAT":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        return _form_error(error)

    cookies = [result.value.session.cookie] if result.value.session else []
    return redirect(ApplicationConfig.DEFAULT_REDIRECT_URL, cookies)


# ============================================================================
# Password reset
# ============================================================================


class ForgotPasswordRequest(BaseModel):
    """Forgot password HTTP request payload"""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., description="User email address")
    challenge_token: Optional[str] = Field(
        None, alias="cf-turnstile-response", description="Turnstile token"
    )


@router.get("/forgot-password")
async def forgot_password_page(context: RequestAuthContext = Depends(get_auth_context)):
    return await _guest_page(context, ApplicationConfig.DEFAULT_REDIRECT_URL)


@router.post("/forgot-password", dependencies=[Depends(verify_origin)])
async def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: Notifier = Depends(get_notifier),
    challenge_verifier: Optional[ChallengeVerifier] = Depends(get_challenge_verifier),
    policy: AuthPolicy = Depends(get_auth_policy),
):
    """
    Forgot Password

    Emails a single-use reset link to a verified account.

    Returns:
        - 200 OK with a confirmation message
        - 200 OK with an error body on invalid email, challenge or delivery failure
    """
    command = ForgotPasswordCommand(
        email=payload.email,
        base_url=_base_url(request),
        challenge_token=payload.challenge_token,
        client_ip=_client_ip(request),
    )
    use_case = ForgotPasswordUseCase(uow, notifier, challenge_verifier, policy)
    result = await use_case.execute(command)

    if result.is_err():
        return _form_error(result.error)

    return render(result.value.model_dump())


class ResetPasswordRequest(BaseModel):
    """Reset password HTTP request payload"""

    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(..., description="New password")
    password_confirm: str = Field(..., alias="password-confirm", description="New password again")


@router.get("/reset-password/{token}")
async def reset_password_page(token: str, context: RequestAuthContext = Depends(get_auth_context)):
    return await _guest_page(context, ApplicationConfig.DEFAULT_REDIRECT_URL)


@router.post("/reset-password", dependencies=[Depends(verify_origin)])
@router.post("/reset-password/{token}", dependencies=[Depends(verify_origin)])
async def reset_password(
    payload: ResetPasswordRequest,
    token: Optional[str] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_manager: SessionManager = Depends(get_session_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    policy: AuthPolicy = Depends(get_auth_policy),
):
    """
    Reset Password

    Returns:
        - 302 Found to the default page with a fresh session cookie
        - 200 OK with an error body on missing/unknown/expired token or mismatch
    """
    command = ResetPasswordCommand(
        token=token,
        password=payload.password,
        password_confirmation=payload.password_confirm,
    )
    use_case = ResetPasswordUseCase(uow, session_manager, password_hasher, policy)
    result = await use_case.execute(command)

    if result.is_err():
        return _form_error(result.error)

    return redirect(ApplicationConfig.DEFAULT_REDIRECT_URL, [result.value.cookie])


# ============================================================================
# Logout
# ============================================================================


@router.post("/logout", dependencies=[Depends(verify_origin)])
async def logout(context: RequestAuthContext = Depends(get_auth_context)):
    """
    Logout

    Always redirects to the default page; clears the session cookie when a
    session was active.
    """
    result = await LogoutUseCase(context).execute()
    if result.is_err():
        raise ServerError(result.error)

    cookies = [result.value.cookie] if result.value.cookie else []
    return redirect(ApplicationConfig.DEFAULT_REDIRECT_URL, cookies)
