"""
Auth Service Domain Enums

Enumeration types used across domain entities and flows.
"""

from enum import Enum


class AccountState(str, Enum):
    """Registration lifecycle of an account"""

    unregistered = "unregistered"
    pending_verification = "pending_verification"
    verified = "verified"


class OAuthProvider(str, Enum):
    """Known external identity providers"""

    github = "github"
    google = "google"
