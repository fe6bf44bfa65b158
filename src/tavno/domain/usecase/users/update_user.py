from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tavno.domain.models.UserModel import User
from tavno.domain.usecase._shared import ensure_user, user_key
from tavno.domain.usecase.ports import AssetStore, ConflictError, KeyedLocks, UsersRepo
from tavno.domain.usecase.users.register_user import REGISTRY_KEY

log = logging.getLogger(__name__)


@dataclass(slots=True)
class AvatarUpload:
    filename: str
    content: bytes


@dataclass(slots=True)
class UpdateUserProfile:
    users_repo: UsersRepo
    locks: KeyedLocks
    assets: AssetStore

    async def execute(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        phone: Optional[str] = None,
        avatar: Optional[AvatarUpload] = None,
    ) -> User:
        async with self.locks.hold(REGISTRY_KEY, user_key(user_id)):
            user = await ensure_user(self.users_repo, user_id)

            new_name = (name or "").strip()
            if new_name and new_name != user.name:
                other = await self.users_repo.get_by_name(new_name)
                if other is not None and other.user_id != user.user_id:
                    raise ConflictError("Username already taken")
                user.name = new_name
            if bio is not None:
                user.bio = bio
            if phone is not None:
                user.phone = phone

            previous_avatar = None
            if avatar is not None and avatar.content:
                previous_avatar = user.avatar
                user.avatar = await self.assets.save(avatar.filename, avatar.content)

            await self.users_repo.upsert(user)

        if previous_avatar:
            try:
                await self.assets.release(previous_avatar)
            except OSError as exc:
                log.warning("Failed to remove old avatar for user %s: %s", user_id, exc)
        return user
