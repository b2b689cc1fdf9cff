from __future__ import annotations

import asyncio
import logging
from typing import Any

import resend

from src.app.services.notifier import EmailMessage, Notifier, NotifierError

logger = logging.getLogger(__name__)


class ResendEmailNotifier(Notifier):
    """Delivers email through the Resend API."""

    def __init__(self, api_key: str, from_email: str):
        if not api_key:
            raise NotifierError("RESEND_API_KEY is not configured")
        if not from_email:
            raise NotifierError("EMAIL_FROM is not configured")
        self.api_key = api_key
        self.from_email = from_email

    def _send(self, payload: dict[str, Any]) -> Any:
        resend.api_key = self.api_key
        return resend.Emails.send(payload)

    async def send_email(self, message: EmailMessage) -> str | None:
        payload: dict[str, Any] = {
            "from": self.from_email,
            "to": [message.to],
            "subject": message.subject,
        }
        if message.html_body:
            payload["html"] = message.html_body
        if message.text_body:
            payload["text"] = message.text_body

        try:
            # The SDK is blocking; keep it off the event loop
            res = await asyncio.to_thread(self._send, payload)
        except Exception as exc:  # noqa: BLE001 - the SDK raises provider-specific errors
            raise NotifierError(f"Resend send failed: {exc}") from exc

        msg_id: str | None = None
        if isinstance(res, dict):
            if res.get("error"):
                raise NotifierError(f"Resend API error: {res.get('error')}")
            value = res.get("id")
            if isinstance(value, str) and value.strip():
                msg_id = value.strip()

        logger.info("Resend email sent: to=%s msg_id=%s", message.to, msg_id)
        return msg_id


class LoggingNotifier(Notifier):
    """Development notifier: writes the plain text body to the log."""

    async def send_email(self, message: EmailMessage) -> str | None:
        logger.info(
            "Email to=%s subject=%r\n%s",
            message.to,
            message.subject,
            message.text_body or message.html_body or "",
        )
        return None


def build_notifier(provider: str, api_key: str = "", from_email: str = "") -> Notifier:
    provider = (provider or "").strip().lower() or "resend"
    if provider == "log":
        return LoggingNotifier()
    if provider == "resend":
        return ResendEmailNotifier(api_key=api_key, from_email=from_email)
    raise NotifierError(f"Unsupported EMAIL_PROVIDER={provider!r}. Supported: resend, log.")
