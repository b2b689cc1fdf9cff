"""
Flow outcomes handed to the boundary layer.

Each variant tells the HTTP layer what to do; nothing below the API raises
responses as control flow.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from src.app.services.cookies import CookieDirective
from src.domain.entities import Session, User
from src.libs.result import Error


@dataclass
class Redirect:
    url: str
    status_code: int = 302
    cookies: List[CookieDirective] = field(default_factory=list)


@dataclass
class Rendered:
    body: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200
    cookies: List[CookieDirective] = field(default_factory=list)


@dataclass
class Denied:
    status_code: int
    error: Optional[Error] = None


@dataclass
class Authenticated:
    user: User
    session: Session


FlowOutcome = Union[Redirect, Rendered, Denied, Authenticated]
