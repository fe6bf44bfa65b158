from __future__ import annotations

from typing import List, Optional

from tavno.domain.models.UserModel import User
from tavno.infra.serialization import from_document, to_document
from tavno.infra.store import DocumentStore

COLL = "users"


class UsersRepoStore:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self, user_id: int) -> Optional[User]:
        doc = self.store.get(COLL, int(user_id))
        return from_document(User, doc) if doc else None

    async def get_by_email(self, email: str) -> Optional[User]:
        doc = self.store.find(COLL, "email", email)
        return from_document(User, doc) if doc else None

    async def get_by_name(self, name: str) -> Optional[User]:
        doc = self.store.find(COLL, "name", name)
        return from_document(User, doc) if doc else None

    async def list(self) -> List[User]:
        return [from_document(User, doc) for doc in self.store.all(COLL)]

    async def upsert(self, user: User) -> None:
        await self.store.put(COLL, user.user_id, to_document(user))

    async def next_id(self) -> int:
        return self.store.next_id(COLL)
