from __future__ import annotations

from typing import List

from tavno.domain.models.ReviewModel import Review
from tavno.infra.serialization import from_document, to_document
from tavno.infra.store import DocumentStore

COLL = "reviews"


class ReviewsRepoStore:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_for_user(self, user_id: int) -> List[Review]:
        return [
            from_document(Review, doc)
            for doc in self.store.all(COLL)
            if doc.get("to_user_id") == int(user_id)
        ]

    async def upsert(self, review: Review) -> None:
        await self.store.put(COLL, review.review_id, to_document(review))

    async def next_id(self) -> int:
        return self.store.next_id(COLL)
