import logging

from ...application.ports.notification_sender import Notification, NotificationSender

logger = logging.getLogger(__name__)


class LoggingNotificationSender(NotificationSender):
    """Development sender: writes the message to the log instead of delivering it."""

    async def send(self, notification: Notification) -> None:
        logger.info(f"Notification '{notification.kind}' for {notification.email} not delivered (log backend)")
        # Body carries live codes and reset links
        logger.debug(f"{notification.subject}\n{notification.body}")
