from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class EmailMessage(BaseModel):
    """Outbound transactional email"""

    to: str
    subject: str
    html_body: Optional[str] = None
    text_body: Optional[str] = None


class NotifierError(RuntimeError):
    """Raised when an email could not be delivered (including timeouts)."""


class Notifier(ABC):
    """Email delivery capability - application layer"""

    @abstractmethod
    async def send_email(self, message: EmailMessage) -> Optional[str]:
        """Deliver a message. Returns the provider message id when known.

        Raises:
            NotifierError: delivery failed
        """
        pass
