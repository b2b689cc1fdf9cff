import base64
import json
import uuid

import pytest

from src.app.services.codes import (
    generate_random_code,
    generate_reset_token,
    issue_email_verification_code,
)
from src.app.services.cookies import UserPrefsCookie


def test_random_code_shape():
    for _ in range(200):
        code = generate_random_code(4)
        assert len(code) == 4
        assert set(code) <= set("123456789")


def test_random_code_size():
    assert len(generate_random_code(6)) == 6


def test_reset_token_is_uuid4():
    token = generate_reset_token()

    assert uuid.UUID(token).version == 4
    assert token != generate_reset_token()


@pytest.mark.asyncio
async def test_issue_code_replaces_prior(mock_uow, policy):
    code = await issue_email_verification_code(mock_uow, "user-1", "user@acme.io", policy)

    mock_uow.email_verification_codes.delete_by_user_id.assert_called_once_with("user-1")
    assert code.user_id == "user-1"
    assert code.email == "user@acme.io"
    assert not code.retry


def test_user_prefs_round_trip():
    prefs = UserPrefsCookie(max_age=604_800)

    cookie = prefs.remember_redirect({}, "/dashboard")

    assert cookie.name == "user-prefs"
    assert cookie.max_age == 604_800
    assert json.loads(base64.b64decode(cookie.value)) == {"redirectUrl": "/dashboard"}
    assert prefs.redirect_url({"user-prefs": cookie.value}) == "/dashboard"


def test_user_prefs_keeps_other_keys():
    prefs = UserPrefsCookie()
    raw = base64.b64encode(json.dumps({"theme": "dark"}).encode()).decode()

    cookie = prefs.remember_redirect({"user-prefs": raw}, "/x")

    assert prefs.parse({"user-prefs": cookie.value}) == {"theme": "dark", "redirectUrl": "/x"}


@pytest.mark.parametrize("raw", ["!!!", base64.b64encode(b"not json").decode(), base64.b64encode(b"[1]").decode()])
def test_user_prefs_ignores_garbage(raw):
    assert UserPrefsCookie().parse({"user-prefs": raw}) == {}


def test_user_prefs_clear_redirect():
    prefs = UserPrefsCookie()
    cookie = prefs.remember_redirect({}, "/x")

    cleared = prefs.clear_redirect({"user-prefs": cookie.value})

    assert prefs.redirect_url({"user-prefs": cleared.value}) is None
