import base64
import secrets
import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    return str(uuid.uuid4())


def generate_id_from_entropy(entropy_bytes: int = 25) -> str:
    """Random identifier encoded as lowercase base32 without padding.

    25 bytes of entropy give a 40 character identifier.
    """
    raw = secrets.token_bytes(entropy_bytes)
    return base64.b32encode(raw).decode("ascii").rstrip("=").lower()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
