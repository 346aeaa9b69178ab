from abc import ABC, abstractmethod


class IEmailSender(ABC):
    """Outbound email delivery - transport, retries and receipts are the sender's concern"""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        """Queue or deliver one message; returns False when delivery was refused"""
        pass
