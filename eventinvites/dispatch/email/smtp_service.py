import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from eventinvites.dispatch.email.base import EmailContent, EmailServiceBase
from eventinvites.dispatch.email.templates import EmailTemplates

logger = logging.getLogger(__name__)


class SMTPEmailConfig(Protocol):
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    emails_from: str


class SMTPEmailService(EmailServiceBase):
    """Sends multipart emails through a plain SMTP relay (mailpit in development)."""

    def __init__(self, config: SMTPEmailConfig, smtp_class: type[smtplib.SMTP] = smtplib.SMTP):
        self._config = config
        self._smtp_class = smtp_class

    def build_message(self, to_address: str, subject: str, content: EmailContent) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._config.emails_from
        msg["To"] = to_address
        msg.set_content(EmailTemplates.render_text(content))
        msg.add_alternative(EmailTemplates.render_html(subject, content), subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with self._smtp_class(self._config.smtp_host, self._config.smtp_port) as server:
            # relays without credentials are local and speak plain SMTP
            if self._config.smtp_user and self._config.smtp_password:
                server.starttls()
                server.login(self._config.smtp_user, self._config.smtp_password)
            server.send_message(msg)

    async def send_email(
        self,
        to_address: str,
        subject: str,
        content: EmailContent,
    ) -> None:
        msg = self.build_message(to_address, subject, content)
        # smtplib blocks
        await asyncio.to_thread(self._deliver, msg)
        logger.debug("Email to %s handed to %s", to_address, self._config.smtp_host)
