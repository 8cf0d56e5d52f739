from typing import Protocol, Optional
from dataclasses import dataclass


@dataclass
class Notification:
    kind: str  # otp, reset_password
    email: str
    subject: str
    body: str
    name: Optional[str] = None
    phone: Optional[str] = None


class NotificationSender(Protocol):
    async def send(self, notification: Notification) -> None:
        ...
