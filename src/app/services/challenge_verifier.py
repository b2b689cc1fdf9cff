from abc import ABC, abstractmethod
from typing import Optional


class ChallengeVerifierError(RuntimeError):
    """Raised when the challenge service cannot be reached or misbehaves."""


class ChallengeVerifier(ABC):
    """Bot-mitigation capability - application layer"""

    @abstractmethod
    async def verify(self, token: Optional[str], client_ip: Optional[str] = None) -> bool:
        """Return True when the challenge token was issued to a human.

        Raises:
            ChallengeVerifierError: the challenge service could not answer
        """
        pass
