from __future__ import annotations

import logging

import httpx

from src.app.services.challenge_verifier import ChallengeVerifier, ChallengeVerifierError

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
TURNSTILE_TIMEOUT = 5.0


class TurnstileChallengeVerifier(ChallengeVerifier):
    """Validates Cloudflare Turnstile tokens against the siteverify API."""

    def __init__(
        self,
        secret_key: str,
        timeout: float = TURNSTILE_TIMEOUT,
        verify_url: str = TURNSTILE_VERIFY_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not secret_key:
            raise ChallengeVerifierError("Turnstile secret key is not configured.")
        self.secret_key = secret_key
        self.timeout = timeout
        self.verify_url = verify_url
        self.transport = transport

    async def verify(self, token: str | None, client_ip: str | None = None) -> bool:
        candidate = (token or "").strip()
        if not candidate:
            return False

        data: dict[str, str] = {
            "secret": self.secret_key,
            "response": candidate,
        }
        if client_ip:
            data["remoteip"] = client_ip

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.verify_url, data=data)
        except httpx.HTTPError as exc:
            raise ChallengeVerifierError("Unable to verify challenge token.") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ChallengeVerifierError("Invalid challenge response.") from exc

        success = bool(payload.get("success"))
        if not success:
            logger.warning(
                "Turnstile rejected token: error-codes=%s", payload.get("error-codes")
            )
        return success
