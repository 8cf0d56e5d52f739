import asyncio
import logging
from typing import Optional

from twilio.base.exceptions import TwilioException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from ...application.ports.notification_sender import Notification, NotificationSender
from ...core.config import Settings
from ...exceptions import NotificationError

logger = logging.getLogger(__name__)


class TwilioSmsSender(NotificationSender):
    """Sends the OTP by SMS to accounts that registered a phone number."""

    SMS_KINDS = ("otp",)

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        self.from_number = settings.TWILIO_PHONE_NUMBER
        self.client = client or Client(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN,
            http_client=TwilioHttpClient(timeout=10),
        )

    async def send(self, notification: Notification) -> None:
        if notification.kind not in self.SMS_KINDS or not notification.phone:
            return
        if not self.from_number:
            raise NotificationError("Twilio sender number not configured")
        try:
            await asyncio.to_thread(
                self.client.messages.create,
                to=notification.phone,
                from_=self.from_number,
                body=notification.body,
            )
        except TwilioException as e:
            logger.error(f"Twilio error: {e}")
            raise NotificationError(f"Failed to send SMS: {e}") from e
