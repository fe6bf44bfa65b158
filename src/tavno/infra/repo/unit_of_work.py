from __future__ import annotations

from typing import List, Sequence

from tavno.domain.models.QuestModel import Quest
from tavno.domain.models.ReviewModel import Review
from tavno.domain.models.UserModel import User
from tavno.infra.serialization import to_document
from tavno.infra.store import DocumentStore, Write


class StoreUnitOfWork:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def commit(
        self,
        *,
        quests: Sequence[Quest] = (),
        users: Sequence[User] = (),
        reviews: Sequence[Review] = (),
    ) -> None:
        writes: List[Write] = []
        writes += [("quests", q.quest_id, to_document(q)) for q in quests]
        writes += [("users", u.user_id, to_document(u)) for u in users]
        writes += [("reviews", r.review_id, to_document(r)) for r in reviews]
        await self.store.put_many(writes)
