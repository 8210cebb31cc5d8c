import logging
from typing import Protocol

import httpx

from eventinvites.dispatch.email.base import EmailContent, EmailServiceBase
from eventinvites.dispatch.email.templates import EmailTemplates

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        config: ResendEmailConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    async def send_email(
        self,
        to_address: str,
        subject: str,
        content: EmailContent,
    ) -> str:
        """Send email via Resend and return the Resend email id."""
        async with self._http_client_class() as client:
            response = await client.post(
                RESEND_EMAILS_URL,
                headers={
                    "Authorization": f"Bearer {self._config.resend_api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self._config.emails_from,
                    "to": [to_address],
                    "subject": subject,
                    "html": EmailTemplates.render_html(subject, content),
                    "text": EmailTemplates.render_text(content),
                },
            )
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError:
                logger.error(
                    "Resend rejected email to %s: %s %s",
                    to_address,
                    response.status_code,
                    response.text,
                )
                raise

            resend_email_id = response.json().get("id")
            logger.debug("Resend accepted email to %s (id=%s)", to_address, resend_email_id)
            return resend_email_id
