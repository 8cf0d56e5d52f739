import html
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from ...application.ports.notification_sender import Notification, NotificationSender
from ...core.config import Settings
from ...exceptions import NotificationError

logger = logging.getLogger(__name__)


class SmtpEmailSender(NotificationSender):
    """Async email delivery over SMTP."""

    def __init__(self, settings: Settings):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME
        self.app_name = settings.APP_NAME

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    def _build_message(self, notification: Notification) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = notification.email
        message["Subject"] = f"{notification.subject} - {self.app_name}"

        greeting = f"Dear {notification.name},\n\n" if notification.name else ""
        text = f"{greeting}{notification.body}\n"
        # Name and body are user-influenced; never emit them as markup
        markup = "<br>".join(html.escape(line) for line in text.splitlines())
        message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(f"<html><body>{markup}</body></html>", "html"))
        return message

    async def send(self, notification: Notification) -> None:
        if not self.is_configured:
            raise NotificationError("SMTP email service not configured")
        try:
            await aiosmtplib.send(
                self._build_message(notification),
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=self.use_tls,
            )
        except aiosmtplib.SMTPException as e:
            logger.error(f"SMTP error sending {notification.kind} email: {e}")
            raise NotificationError(f"Failed to send email: {e}") from e
        logger.info(f"Sent {notification.kind} email")
