"""Email notification senders and templates."""

from ..config.settings import Settings
from .models import EmailBody, EmailSender, NotificationOutcome, SendResult
from .senders import SendGridEmailSender, SmtpEmailSender
from .templates import render_alert_email


def create_email_sender(settings: Settings) -> EmailSender:
    """Build the email sender selected by ``settings.email_backend``."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_address=settings.email_from_address,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_name=settings.email_from_name,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.email_timeout_seconds,
        )
    return SendGridEmailSender(
        api_key=settings.sendgrid_api_key,
        from_address=settings.email_from_address,
        from_name=settings.email_from_name,
        api_url=settings.sendgrid_api_url,
        timeout_seconds=settings.email_timeout_seconds,
    )


__all__ = [
    "EmailBody",
    "EmailSender",
    "NotificationOutcome",
    "SendGridEmailSender",
    "SendResult",
    "SmtpEmailSender",
    "create_email_sender",
    "render_alert_email",
]
