from __future__ import annotations

from dataclasses import dataclass
from typing import List

from tavno.domain.models.UserModel import Notification
from tavno.domain.usecase._shared import ensure_user, parse_id, user_key
from tavno.domain.usecase.ports import KeyedLocks, UsersRepo


@dataclass(slots=True)
class ListNotifications:
    users_repo: UsersRepo

    async def execute(self, user_id: int) -> List[Notification]:
        user = await ensure_user(self.users_repo, user_id)
        return list(user.notifications)


@dataclass(slots=True)
class NotifyUser:
    users_repo: UsersRepo
    locks: KeyedLocks

    async def execute(self, user_id: int, message: str) -> Notification:
        async with self.locks.hold(user_key(user_id)):
            user = await ensure_user(self.users_repo, user_id)
            notification = user.notify(message)
            await self.users_repo.upsert(user)
        return notification


@dataclass(slots=True)
class MarkNotificationRead:
    users_repo: UsersRepo
    locks: KeyedLocks

    async def execute(self, user_id: int, notification_id: int | str) -> Notification:
        nid = parse_id(notification_id, kind="notification ID")
        async with self.locks.hold(user_key(user_id)):
            user = await ensure_user(self.users_repo, user_id)
            notification = user.mark_notification_read(nid)
            await self.users_repo.upsert(user)
        return notification
