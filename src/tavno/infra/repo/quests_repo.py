from __future__ import annotations

from typing import List, Optional

from tavno.domain.models.QuestModel import Quest
from tavno.infra.serialization import from_document, to_document
from tavno.infra.store import DocumentStore

COLL = "quests"


class QuestsRepoStore:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self, quest_id: int) -> Optional[Quest]:
        doc = self.store.get(COLL, int(quest_id))
        return from_document(Quest, doc) if doc else None

    async def list(self) -> List[Quest]:
        return [from_document(Quest, doc) for doc in self.store.all(COLL)]

    async def upsert(self, quest: Quest) -> None:
        await self.store.put(COLL, quest.quest_id, to_document(quest))

    async def delete(self, quest_id: int) -> bool:
        return await self.store.remove(COLL, int(quest_id))

    async def next_id(self) -> int:
        return self.store.next_id(COLL)
