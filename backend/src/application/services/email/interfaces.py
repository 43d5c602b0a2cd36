"""
E-mail Service Interface
"""
from abc import ABC, abstractmethod


class IEmailService(ABC):
    """Outbound e-mail delivery"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> bool:
        """
        Deliver one message.

        Returns False when delivery is disabled; raises when every attempt failed.
        """
        pass
