import pytest
from sqlmodel import select

from src.adapter.repositories.email_verification_code_repository import (
    EmailVerificationCodeRepository,
)
from src.domain.entities import EmailVerificationCode, User
from tests.utils.api_client import response_cookies, session_cookie


async def signup(client, email="a@x.com", password="password1"):
    response = await client.post("/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 302
    return session_cookie(response)


async def current_code(session_factory):
    async with session_factory() as session:
        return (await session.exec(select(EmailVerificationCode))).one_or_none()


async def get_user(session_factory, email="a@x.com"):
    async with session_factory() as session:
        return (await session.exec(select(User).where(User.email == email))).one()


def wrong_code(code: str) -> str:
    return "".join("1" if digit != "1" else "2" for digit in code)


@pytest.mark.asyncio
async def test_end_to_end_verification(client, session_factory):
    """Sign up, miss once, then verify with the right code"""
    first_session = await signup(client)

    me = await client.get("/user/me", cookies={"session": first_session})
    assert me.status_code == 200
    assert me.json()["email_verified"] is False
    assert me.json()["state"] == "pending_verification"

    code = (await current_code(session_factory)).code
    mismatch = await client.post(
        "/auth/verify-email-address",
        json={"code": wrong_code(code)},
        cookies={"session": first_session},
    )
    assert mismatch.status_code == 200
    error = mismatch.json()["error"]
    assert error["code"] == "CODE_MISMATCH"
    assert error["retries_left"] == 1

    verified = await client.post(
        "/auth/verify-email-address",
        json={"code": code},
        cookies={"session": first_session},
    )
    assert verified.status_code == 302
    assert verified.headers["location"] == "/"
    new_session = session_cookie(verified)
    assert new_session != first_session

    assert (await get_user(session_factory)).email_verified is True
    assert await current_code(session_factory) is None

    old = await client.get("/user/me", cookies={"session": first_session})
    assert old.status_code == 401
    fresh = await client.get("/user/me", cookies={"session": new_session})
    assert fresh.status_code == 200
    assert fresh.json()["email_verified"] is True
    assert fresh.json()["state"] == "verified"


@pytest.mark.asyncio
async def test_retry_ceiling(client, session_factory):
    session_id = await signup(client)
    async with session_factory() as session:
        row = (await session.exec(select(EmailVerificationCode))).one()
        row.code = "1234"
        session.add(row)
        await session.commit()

    responses = [
        await client.post(
            "/auth/verify-email-address",
            json={"code": "0000"},
            cookies={"session": session_id},
        )
        for _ in range(3)
    ]

    codes = [response.json()["error"]["code"] for response in responses]
    assert codes == ["CODE_MISMATCH", "CODE_MISMATCH", "RETRY_EXHAUSTED"]
    assert (
        responses[0].json()["error"]["retries_left"]
        > responses[1].json()["error"]["retries_left"]
    )
    assert await current_code(session_factory) is None


@pytest.mark.asyncio
async def test_malformed_code_is_bad_request(client):
    session_id = await signup(client)

    response = await client.post(
        "/auth/verify-email-address", json={"code": "12"}, cookies={"session": session_id}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CODE_FORMAT"


@pytest.mark.asyncio
async def test_verify_requires_session(client):
    response = await client.post("/auth/verify-email-address", json={"code": "1234"})

    assert response.status_code == 302
    assert response.headers["location"] == "/signin"
    assert "user-prefs" in response_cookies(response)


@pytest.mark.asyncio
async def test_verify_rejects_foreign_origin(client):
    session_id = await signup(client)

    response = await client.post(
        "/auth/verify-email-address",
        json={"code": "1234"},
        cookies={"session": session_id},
        origin="https://evil.test",
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_verification_is_atomic(client, session_factory, monkeypatch):
    """A failure while deleting the code leaves the user unverified and the code in place"""
    session_id = await signup(client)
    code = (await current_code(session_factory)).code

    async def broken_delete(self, user_id, email):
        await self.session.flush()
        raise RuntimeError("storage failure")

    monkeypatch.setattr(EmailVerificationCodeRepository, "delete", broken_delete)

    with pytest.raises(RuntimeError):
        await client.post(
            "/auth/verify-email-address",
            json={"code": code},
            cookies={"session": session_id},
        )

    assert (await get_user(session_factory)).email_verified is False
    assert (await current_code(session_factory)).code == code


@pytest.mark.asyncio
async def test_resend_replaces_code(client, notifier, session_factory):
    session_id = await signup(client)
    first = await current_code(session_factory)

    response = await client.post(
        "/auth/verify-email-address",
        json={"resend": True},
        cookies={"session": session_id},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "sent"
    second = await current_code(session_factory)
    assert second is not None
    assert not second.retry
    assert second.expires_at >= first.expires_at
    assert len(notifier.messages) == 2


@pytest.mark.asyncio
async def test_verified_user_is_redirected(client, session_factory):
    session_id = await signup(client)
    code = (await current_code(session_factory)).code
    verified = await client.post(
        "/auth/verify-email-address", json={"code": code}, cookies={"session": session_id}
    )

    page = await client.get(
        "/auth/verify-email-address", cookies={"session": session_cookie(verified)}
    )

    assert page.status_code == 307
    assert page.headers["location"] == "/"


@pytest.mark.asyncio
async def test_verify_with_split_digits(client, session_factory):
    session_id = await signup(client)
    code = (await current_code(session_factory)).code

    response = await client.post(
        "/auth/verify-email-address",
        json={f"code-{index}": digit for index, digit in enumerate(code, start=1)},
        cookies={"session": session_id},
    )

    assert response.status_code == 302
    assert (await get_user(session_factory)).email_verified is True
