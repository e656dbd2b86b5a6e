"""Email channel registry.

Provides singleton access to the email adapter. SMTP is used when a mail
host is configured; otherwise the in-memory fake adapter records messages.
"""

import structlog

from notifications.channel.email_port import EmailPort
from shared.config import get_settings

logger = structlog.get_logger(__name__)

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    global _email_channel
    if _email_channel is None:
        settings = get_settings()
        if settings.mail_configured:
            from notifications.channel.smtp_email import SMTPEmailAdapter

            _email_channel = SMTPEmailAdapter(
                host=settings.mail_host,
                port=settings.mail_port,
                sender=settings.mail_sender,
                username=settings.mail_username,
                password=settings.mail_password,
                use_tls=settings.mail_use_tls,
            )
        else:
            from notifications.channel.fake_email import FakeEmailAdapter

            logger.warning("Mail host is not configured, emails are recorded in memory only")
            _email_channel = FakeEmailAdapter()
    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    """Override the active email adapter (useful for tests)."""
    global _email_channel
    _email_channel = channel


def reset_channels() -> None:
    """Close and forget the active adapter."""
    global _email_channel
    if _email_channel is not None:
        _email_channel.close()
    _email_channel = None
