from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tavno.domain.models.UserModel import User
from tavno.domain.usecase.ports import PasswordHasher, UnauthenticatedError, UsersRepo


@dataclass(slots=True)
class AuthenticateUser:
    users_repo: UsersRepo
    hasher: PasswordHasher

    async def execute(self, email: Optional[str], password: Optional[str]) -> User:
        user = await self.users_repo.get_by_email((email or "").strip())
        if user is None or not self.hasher.verify(password or "", user.password_hash):
            raise UnauthenticatedError("Incorrect email or password")
        return user
