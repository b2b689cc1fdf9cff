import base64
import json

import pytest

from tests.utils.api_client import response_cookies, session_cookie


async def register(client, email="user@acme.io", password="password1"):
    response = await client.post("/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 302


def prefs_value(redirect_url: str) -> str:
    return base64.b64encode(json.dumps({"redirectUrl": redirect_url}).encode()).decode()


@pytest.mark.asyncio
async def test_signin_success(client):
    await register(client)

    response = await client.post(
        "/auth/signin", json={"email": "user@acme.io", "password": "password1"}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    me = await client.get("/user/me", cookies={"session": session_cookie(response)})
    assert me.json()["email"] == "user@acme.io"


@pytest.mark.asyncio
async def test_signin_follows_remembered_url(client):
    await register(client)

    response = await client.post(
        "/auth/signin",
        json={"email": "user@acme.io", "password": "password1"},
        cookies={"user-prefs": prefs_value("http://testserver/user/profile")},
    )

    assert response.status_code == 302
    assert response.headers["location"] == "http://testserver/user/profile"
    cleared = response_cookies(response)["user-prefs"].value
    assert json.loads(base64.b64decode(cleared))["redirectUrl"] == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password",
    [("user@acme.io", "wrong-password"), ("ghost@acme.io", "password1")],
)
async def test_signin_invalid_credentials(client, email, password):
    """Wrong password and unknown email are indistinguishable"""
    await register(client)

    response = await client.post("/auth/signin", json={"email": email, "password": password})

    assert response.status_code == 200
    assert response.json()["error"] == {
        "code": "INVALID_CREDENTIALS",
        "message": "Invalid email or password",
    }
    assert "session" not in response_cookies(response)


@pytest.mark.asyncio
async def test_signin_rejects_missing_origin(client):
    await register(client)

    response = await client.post(
        "/auth/signin",
        json={"email": "user@acme.io", "password": "password1"},
        origin=None,
    )

    assert response.status_code == 403
