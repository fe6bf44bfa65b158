"""Collaborator protocols the use cases depend on."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Protocol, Sequence

from tavno.domain.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    UpstreamError,
    ValidationError,
)
from tavno.domain.models.QuestModel import Quest
from tavno.domain.models.ReviewModel import Review
from tavno.domain.models.UserModel import User


class QuestsRepo(Protocol):
    async def get(self, quest_id: int) -> Optional[Quest]: ...

    async def list(self) -> List[Quest]: ...

    async def upsert(self, quest: Quest) -> None: ...

    async def delete(self, quest_id: int) -> bool: ...

    async def next_id(self) -> int: ...


class UsersRepo(Protocol):
    async def get(self, user_id: int) -> Optional[User]: ...

    async def get_by_email(self, email: str) -> Optional[User]: ...

    async def get_by_name(self, name: str) -> Optional[User]: ...

    async def upsert(self, user: User) -> None: ...

    async def next_id(self) -> int: ...


class ReviewsRepo(Protocol):
    async def list_for_user(self, user_id: int) -> List[Review]: ...

    async def upsert(self, review: Review) -> None: ...

    async def next_id(self) -> int: ...


class KeyedLocks(Protocol):
    def hold(self, *keys: Hashable) -> AbstractAsyncContextManager[None]: ...


class UnitOfWork(Protocol):
    """Persists a set of changed records together or not at all."""

    async def commit(
        self,
        *,
        quests: Sequence[Quest] = (),
        users: Sequence[User] = (),
        reviews: Sequence[Review] = (),
    ) -> None: ...


class QuestEventType(str, Enum):
    QUEST_CREATED = "QUEST_CREATED"
    QUEST_UPDATED = "QUEST_UPDATED"
    QUEST_DELETED = "QUEST_DELETED"


class EventPublisher(Protocol):
    def publish(
        self, event_type: QuestEventType, payload: Quest | Dict[str, Any]
    ) -> None: ...


class AssetStore(Protocol):
    async def save(self, filename: str, content: bytes) -> str: ...

    async def release(self, path: Optional[str]) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, hashed: str) -> bool: ...


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class ActivityAuditor(Protocol):
    async def record_completion(
        self, quest: Quest, user_id: int, accepted_at: Optional[datetime]
    ) -> None: ...


__all__ = [
    "QuestsRepo",
    "UsersRepo",
    "ReviewsRepo",
    "KeyedLocks",
    "UnitOfWork",
    "QuestEventType",
    "EventPublisher",
    "AssetStore",
    "PasswordHasher",
    "TextGenerator",
    "ActivityAuditor",
    "DomainError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "ValidationError",
    "UnauthenticatedError",
    "UpstreamError",
]
