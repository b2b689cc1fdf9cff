"""
Password hasher implementations.

Argon2id is the default (memory-hard); bcrypt remains available for
deployments that already store bcrypt hashes.
"""

import bcrypt
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError

from src.app.services.password_hasher import PasswordHasher

_BCRYPT_MAX_BYTES = 72


def _bcrypt_input(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class Argon2PasswordHasher(PasswordHasher):
    """Argon2id via argon2-cffi"""

    def __init__(self, time_cost: int = 2, memory_cost: int = 19_456, parallelism: int = 1):
        self._hasher = Argon2Hasher(
            time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism
        )

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, hashed_password: str, password: str) -> bool:
        try:
            return self._hasher.verify(hashed_password, password)
        except (VerificationError, InvalidHashError):
            return False


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt with cost factor 12. Input beyond 72 bytes is ignored by the algorithm."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify(self, hashed_password: str, password: str) -> bool:
        try:
            return bcrypt.checkpw(_bcrypt_input(password), hashed_password.encode("utf-8"))
        except ValueError:
            return False


def build_password_hasher(name: str) -> PasswordHasher:
    if name == "bcrypt":
        return BcryptPasswordHasher()
    if name == "argon2":
        return Argon2PasswordHasher()
    raise ValueError(f"Unsupported PASSWORD_HASHER={name!r}. Supported: argon2, bcrypt.")
