"""
Logout Use Case

Ends the session behind the current request.
"""

from src.libs.result import Result, Return
from src.app.services.session_manager import RequestAuthContext
from .dtos import LogoutResponse


class LogoutUseCase:
    """
    Use case for logging out.

    Business Rules:
    - No active session is a no-op (already logged out)
    - Otherwise the session is deleted and the cookie must be cleared
    """

    def __init__(self, context: RequestAuthContext):
        self.context = context

    async def execute(self) -> Result[LogoutResponse]:
        validation = await self.context.validate()
        if validation.session is None:
            return Return.ok(LogoutResponse(logged_out=False))

        session_manager = self.context.session_manager
        await session_manager.invalidate_session(validation.session.id)
        self.context.forget()

        return Return.ok(
            LogoutResponse(
                logged_out=True,
                cookie=session_manager.create_blank_session_cookie(),
            )
        )
