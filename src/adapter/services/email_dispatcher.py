"""Email dispatch backends.

- SMTP via aiosmtplib (production)
- Log-only (development / testing): logs the message instead of sending

Set EMAIL_BACKEND=smtp and configure SMTP_* settings for production.
"""

import logging
from email.message import EmailMessage

import aiosmtplib

from config import ApplicationConfig
from src.app.services.notification_dispatcher import INotificationDispatcher

logger = logging.getLogger(__name__)


class LogEmailDispatcher(INotificationDispatcher):
    """Development dispatcher: logs the email instead of sending it."""

    async def send(self, to: str, subject: str, html: str) -> None:
        logger.info("EMAIL to=%s subject=%s\n%s", to, subject, html)


class SmtpEmailDispatcher(INotificationDispatcher):
    """Production dispatcher: sends HTML mail over SMTP."""

    def __init__(
        self,
        hostname: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = False,
    ):
        self.hostname = hostname
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    async def send(self, to: str, subject: str, html: str) -> None:
        await aiosmtplib.send(
            self.build_message(to, subject, html),
            hostname=self.hostname,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            use_tls=self.use_tls,
        )


def get_email_dispatcher() -> INotificationDispatcher:
    if ApplicationConfig.EMAIL_BACKEND == "smtp":
        return SmtpEmailDispatcher(
            hostname=ApplicationConfig.SMTP_HOST,
            port=ApplicationConfig.SMTP_PORT,
            sender=ApplicationConfig.EMAIL_FROM,
            username=ApplicationConfig.SMTP_USERNAME,
            password=ApplicationConfig.SMTP_PASSWORD,
            use_tls=ApplicationConfig.SMTP_USE_TLS,
        )
    return LogEmailDispatcher()
