from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tavno.domain.models.UserModel import User
from tavno.domain.usecase._shared import USERS
from tavno.domain.usecase.ports import (
    ConflictError,
    KeyedLocks,
    PasswordHasher,
    UsersRepo,
    ValidationError,
)

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# Serializes checks against the unique name/email indexes.
REGISTRY_KEY = (USERS, "registry")


@dataclass(slots=True)
class RegisterUser:
    users_repo: UsersRepo
    locks: KeyedLocks
    hasher: PasswordHasher

    async def execute(
        self,
        *,
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str],
        username: Optional[str],
        phone: Optional[str] = None,
    ) -> User:
        email = (email or "").strip()
        username = (username or "").strip()
        if not email or not password or not username:
            raise ValidationError("Email, password and username are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        async with self.locks.hold(REGISTRY_KEY):
            if await self.users_repo.get_by_email(email) is not None:
                raise ConflictError("Email already in use")
            if await self.users_repo.get_by_name(username) is not None:
                raise ConflictError("Username already taken")

            user = User(
                user_id=await self.users_repo.next_id(),
                name=username,
                email=email,
                password_hash=self.hasher.hash(password),
                phone=phone or "",
            )
            await self.users_repo.upsert(user)

        log.info("Registered user %s", user.user_id)
        return user
