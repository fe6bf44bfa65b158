from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from tavno.domain.errors import NotFoundError, ValidationError

DEFAULT_AVATAR = "/avatars/default.png"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Notification:
    notification_id: int
    message: str
    read: bool = False
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class User:
    # Identity
    user_id: int
    name: str
    email: str
    password_hash: str = ""

    # Wallet
    balance: int = 0

    # Profile
    bio: str = ""
    avatar: str = DEFAULT_AVATAR
    phone: str = ""

    notifications: List[Notification] = field(default_factory=lambda: [])
    created_at: datetime = field(default_factory=_utcnow)

    # ---------- Notification helpers ----------

    def notify(self, message: str) -> Notification:
        next_id = max((n.notification_id for n in self.notifications), default=0) + 1
        notification = Notification(notification_id=next_id, message=message)
        self.notifications.append(notification)
        return notification

    def find_notification(self, notification_id: int) -> Optional[Notification]:
        for notification in self.notifications:
            if notification.notification_id == notification_id:
                return notification
        return None

    def mark_notification_read(self, notification_id: int) -> Notification:
        notification = self.find_notification(notification_id)
        if notification is None:
            raise NotFoundError(f"Notification {notification_id} does not exist")
        notification.read = True
        return notification

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.read)

    # ---------- Wallet helpers ----------

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise ValidationError("Credit amount must be non-negative")
        self.balance += amount
