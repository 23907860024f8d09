"""Email sender selection."""

from core.config import Settings
from infrastructure.email.sender import IEmailSender, LoggingEmailSender
from infrastructure.email.sendgrid_sender import SendGridEmailSender


def build_email_sender(settings: Settings) -> IEmailSender:
    """Pick the SendGrid sender when an API key is configured."""
    if settings.sendgrid_api_key:
        return SendGridEmailSender(
            api_key=settings.sendgrid_api_key,
            from_email=settings.sendgrid_from_email,
            from_name=settings.sendgrid_from_name,
        )
    return LoggingEmailSender()
