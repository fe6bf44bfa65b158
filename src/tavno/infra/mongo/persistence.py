from __future__ import annotations

from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase

from tavno.infra.store import Document


class MongoPersistence:
    """Write-through backend storing one Mongo document per record, keyed by ``_id``."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def load(self, collection: str) -> Dict[int, Document]:
        out: Dict[int, Document] = {}
        async for doc in self.db[collection].find({}):
            doc_id = int(doc.pop("_id"))
            out[doc_id] = doc
        return out

    async def save(self, collection: str, doc_id: int, doc: Document) -> None:
        payload: Dict[str, Any] = dict(doc)
        payload["_id"] = int(doc_id)
        await self.db[collection].replace_one({"_id": int(doc_id)}, payload, upsert=True)

    async def delete(self, collection: str, doc_id: int) -> None:
        await self.db[collection].delete_one({"_id": int(doc_id)})
