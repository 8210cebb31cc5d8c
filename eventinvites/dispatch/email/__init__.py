from eventinvites.config.settings import settings
from eventinvites.dispatch.email.base import EmailContent, EmailServiceBase, EventDetails
from eventinvites.dispatch.email.resend_service import ResendEmailService
from eventinvites.dispatch.email.smtp_service import SMTPEmailService
from eventinvites.dispatch.email.templates import EmailTemplates


def get_email_service() -> EmailServiceBase:
    if settings.resend_api_key:
        return ResendEmailService(config=settings)
    return SMTPEmailService(config=settings)


__all__ = [
    "EmailContent",
    "EmailServiceBase",
    "EmailTemplates",
    "EventDetails",
    "get_email_service",
]
