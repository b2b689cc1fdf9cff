"""
Unit tests for the password hashers, the Resend notifier and the
Turnstile challenge verifier
"""
import httpx
import pytest
import resend

from src.adapter.services.challenge_verifier import TurnstileChallengeVerifier
from src.adapter.services.notifier import (
    LoggingNotifier,
    ResendEmailNotifier,
    build_notifier,
)
from src.adapter.services.password_hasher import (
    Argon2PasswordHasher,
    BcryptPasswordHasher,
    build_password_hasher,
)
from src.app.services.challenge_verifier import ChallengeVerifierError
from src.app.services.notifier import EmailMessage, NotifierError


@pytest.mark.parametrize(
    "hasher",
    [Argon2PasswordHasher(time_cost=1, memory_cost=8_192), BcryptPasswordHasher(rounds=4)],
)
def test_password_hasher(hasher):
    hashed = hasher.hash("SecurePass123")

    assert hashed != "SecurePass123"
    assert hasher.verify(hashed, "SecurePass123")
    assert not hasher.verify(hashed, "WrongPass123")
    assert not hasher.verify("not-a-hash", "SecurePass123")


def test_build_password_hasher():
    assert isinstance(build_password_hasher("argon2"), Argon2PasswordHasher)
    assert isinstance(build_password_hasher("bcrypt"), BcryptPasswordHasher)
    with pytest.raises(ValueError):
        build_password_hasher("md5")


def make_message():
    return EmailMessage(to="user@acme.io", subject="Hi", html_body="<p>Hi</p>", text_body="Hi")


@pytest.mark.asyncio
async def test_resend_notifier_sends(monkeypatch):
    sent = []

    def fake_send(payload):
        sent.append(payload)
        return {"id": "msg-123"}

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    notifier = ResendEmailNotifier(api_key="re_test", from_email="noreply@acme.io")

    msg_id = await notifier.send_email(make_message())

    assert msg_id == "msg-123"
    assert sent[0]["to"] == ["user@acme.io"]
    assert sent[0]["from"] == "noreply@acme.io"
    assert sent[0]["text"] == "Hi"


@pytest.mark.asyncio
async def test_resend_notifier_wraps_errors(monkeypatch):
    def fake_send(payload):
        raise RuntimeError("boom")

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    notifier = ResendEmailNotifier(api_key="re_test", from_email="noreply@acme.io")

    with pytest.raises(NotifierError):
        await notifier.send_email(make_message())


def test_resend_notifier_requires_key():
    with pytest.raises(NotifierError):
        ResendEmailNotifier(api_key="", from_email="noreply@acme.io")


def test_build_notifier():
    assert isinstance(build_notifier("log"), LoggingNotifier)
    with pytest.raises(NotifierError):
        build_notifier("carrier-pigeon")


def turnstile(handler):
    return TurnstileChallengeVerifier("secret", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_turnstile_success():
    seen = {}

    def handler(request):
        seen["body"] = request.content.decode()
        return httpx.Response(200, json={"success": True})

    assert await turnstile(handler).verify("token", "10.0.0.1") is True
    assert "response=token" in seen["body"]
    assert "remoteip=10.0.0.1" in seen["body"]


@pytest.mark.asyncio
async def test_turnstile_rejection():
    verifier = turnstile(
        lambda request: httpx.Response(
            200, json={"success": False, "error-codes": ["invalid-input-response"]}
        )
    )

    assert await verifier.verify("token") is False


@pytest.mark.asyncio
async def test_turnstile_empty_token_skips_call():
    def handler(request):
        raise AssertionError("should not be called")

    assert await turnstile(handler).verify("  ") is False


@pytest.mark.asyncio
async def test_turnstile_network_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(ChallengeVerifierError):
        await turnstile(handler).verify("token")
