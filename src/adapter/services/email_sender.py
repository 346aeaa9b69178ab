import logging
from typing import Optional

import httpx

from src.app.services.email_sender import IEmailSender

logger = logging.getLogger(__name__)


class LoggingEmailSender(IEmailSender):
    """Development sender - records the envelope, never the body"""

    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        logger.info("Email to %s: %s", to, subject)
        return True


class HttpEmailSender(IEmailSender):
    """Delivers through a transactional email HTTP API (Brevo-style payload)"""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        if not self.api_key:
            logger.error("Email API key is not configured")
            return False

        payload = {
            "sender": {"email": self.sender},
            "to": [{"email": to}],
            "subject": subject,
            "htmlContent": html,
            "textContent": text,
        }
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "api-key": self.api_key,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Email delivery to %s failed: %s", to, exc)
            return False

        if response.status_code >= 400:
            logger.error(
                "Email API returned %s for message to %s", response.status_code, to
            )
            return False

        logger.info("Email sent to %s: %s", to, subject)
        return True
