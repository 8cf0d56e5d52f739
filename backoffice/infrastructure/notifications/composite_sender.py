from typing import Sequence

from ...application.ports.notification_sender import Notification, NotificationSender


class CompositeNotificationSender(NotificationSender):
    """Fan a notification out to every configured channel, in order."""

    def __init__(self, senders: Sequence[NotificationSender]):
        self.senders = list(senders)

    async def send(self, notification: Notification) -> None:
        for sender in self.senders:
            await sender.send(notification)
