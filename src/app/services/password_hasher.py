from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """Password hashing capability - application layer"""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return an encoded hash that embeds its own salt and parameters"""
        pass

    @abstractmethod
    def verify(self, hashed_password: str, password: str) -> bool:
        """Check a password against a stored hash in constant time"""
        pass
