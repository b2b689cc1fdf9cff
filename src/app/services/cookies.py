"""
Cookie directives produced by the auth core.

The core never touches HTTP responses; it hands these directives to the
boundary layer, which applies them with ``Response.set_cookie``.
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CookieDirective(BaseModel):
    """Instruction to set (or clear) one cookie on the response"""

    name: str
    value: str
    path: str = "/"
    http_only: bool = True
    same_site: str = "strict"
    secure: bool = False
    max_age: Optional[int] = None

    @property
    def is_blank(self) -> bool:
        return self.value == "" and self.max_age == 0


class UserPrefsCookie:
    """Codec for the short-lived user preference cookie.

    The value is base64-encoded JSON, e.g. ``{"redirectUrl": "/dashboard"}``.
    """

    REDIRECT_URL_KEY = "redirectUrl"

    def __init__(self, name: str = "user-prefs", max_age: int = 604_800, secure: bool = False):
        self.name = name
        self.max_age = max_age
        self.secure = secure

    def parse(self, cookies: Mapping[str, str]) -> Dict[str, Any]:
        raw = cookies.get(self.name)
        if not raw:
            return {}
        try:
            data = json.loads(base64.b64decode(raw.encode("ascii")).decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError):
            logger.warning("Ignoring malformed %s cookie", self.name)
            return {}
        return data if isinstance(data, dict) else {}

    def serialize(self, prefs: Dict[str, Any]) -> CookieDirective:
        value = base64.b64encode(json.dumps(prefs).encode("utf-8")).decode("ascii")
        return CookieDirective(
            name=self.name,
            value=value,
            same_site="lax",
            secure=self.secure,
            max_age=self.max_age,
        )

    def redirect_url(self, cookies: Mapping[str, str]) -> Optional[str]:
        return self.parse(cookies).get(self.REDIRECT_URL_KEY) or None

    def remember_redirect(self, cookies: Mapping[str, str], url: str) -> CookieDirective:
        prefs = self.parse(cookies)
        prefs[self.REDIRECT_URL_KEY] = url
        return self.serialize(prefs)

    def clear_redirect(self, cookies: Mapping[str, str]) -> CookieDirective:
        prefs = self.parse(cookies)
        prefs[self.REDIRECT_URL_KEY] = ""
        return self.serialize(prefs)
