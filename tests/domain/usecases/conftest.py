from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from tavno.domain.models.QuestModel import Quest
from tavno.domain.models.UserModel import User
from tavno.domain.usecase.ports import QuestEventType
from tavno.infra.repo.quests_repo import QuestsRepoStore
from tavno.infra.repo.reviews_repo import ReviewsRepoStore
from tavno.infra.repo.unit_of_work import StoreUnitOfWork
from tavno.infra.repo.users_repo import UsersRepoStore
from tavno.infra.store import DocumentStore, MemoryPersistence


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: List[Tuple[QuestEventType, Any]] = []

    def publish(self, event_type: QuestEventType, payload: Any) -> None:
        self.events.append((event_type, payload))

    @property
    def types(self) -> List[QuestEventType]:
        return [event_type for event_type, _ in self.events]


class InMemoryAssets:
    def __init__(self) -> None:
        self.saved: Dict[str, bytes] = {}
        self.released: List[Optional[str]] = []

    async def save(self, filename: str, content: bytes) -> str:
        path = f"/uploads/{len(self.saved) + 1}-{filename}"
        self.saved[path] = content
        return path

    async def release(self, path: Optional[str]) -> bool:
        self.released.append(path)
        if not path:
            return False
        return self.saved.pop(path, None) is not None


class PlainHasher:
    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"plain${password}"


@pytest.fixture()
def store() -> DocumentStore:
    return DocumentStore(MemoryPersistence())


@pytest.fixture()
def quests_repo(store: DocumentStore) -> QuestsRepoStore:
    return QuestsRepoStore(store)


@pytest.fixture()
def users_repo(store: DocumentStore) -> UsersRepoStore:
    return UsersRepoStore(store)


@pytest.fixture()
def reviews_repo(store: DocumentStore) -> ReviewsRepoStore:
    return ReviewsRepoStore(store)


@pytest.fixture()
def uow(store: DocumentStore) -> StoreUnitOfWork:
    return StoreUnitOfWork(store)


@pytest.fixture()
def events() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def assets() -> InMemoryAssets:
    return InMemoryAssets()


@pytest.fixture()
def hasher() -> PlainHasher:
    return PlainHasher()


@pytest.fixture()
def add_user(users_repo: UsersRepoStore):
    async def _add(name: str, **extra: Any) -> User:
        user = User(
            user_id=await users_repo.next_id(),
            name=name,
            email=extra.pop("email", f"{name.lower()}@example.com"),
            **extra,
        )
        await users_repo.upsert(user)
        return user

    return _add


@pytest.fixture()
def add_quest(quests_repo: QuestsRepoStore):
    async def _add(creator: User, **extra: Any) -> Quest:
        fields: Dict[str, Any] = dict(
            title="Water the plants",
            description="Balcony only",
            category="Home",
            reward=100,
            slots=1,
        )
        fields.update(extra)
        quest = Quest(
            quest_id=await quests_repo.next_id(),
            creator_id=creator.user_id,
            creator=creator.name,
            **fields,
        )
        await quests_repo.upsert(quest)
        return quest

    return _add
