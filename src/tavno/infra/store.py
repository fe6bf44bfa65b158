"""In-memory authoritative document store with write-through persistence.

Collections map numeric ids to plain documents. Every write goes to the
persistence backend first and only then replaces the in-memory copy, so a
failed backend write leaves both views unchanged.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import (
    Any,
    AsyncIterator,
    Dict,
    Hashable,
    Iterable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

log = logging.getLogger(__name__)

COLLECTIONS = ("users", "quests", "reviews")

Document = Dict[str, Any]
# (collection, id, document)
Write = Tuple[str, int, Document]


class Persistence(Protocol):
    async def load(self, collection: str) -> Dict[int, Document]: ...

    async def save(self, collection: str, doc_id: int, doc: Document) -> None: ...

    async def delete(self, collection: str, doc_id: int) -> None: ...


class MemoryPersistence:
    """Backend that keeps documents in process; used for development and tests."""

    def __init__(self, initial: Optional[Dict[str, Dict[int, Document]]] = None) -> None:
        self.collections: Dict[str, Dict[int, Document]] = {
            name: dict((initial or {}).get(name, {})) for name in COLLECTIONS
        }

    async def load(self, collection: str) -> Dict[int, Document]:
        return copy.deepcopy(self.collections.get(collection, {}))

    async def save(self, collection: str, doc_id: int, doc: Document) -> None:
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(doc)

    async def delete(self, collection: str, doc_id: int) -> None:
        self.collections.setdefault(collection, {}).pop(doc_id, None)


class LockRegistry:
    """One ``asyncio.Lock`` per key, acquired in a stable order.

    Entries exist only while some task holds or waits for the key.
    """

    def __init__(self) -> None:
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    def _checkout(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        return lock

    def _checkin(self, key: Hashable) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, *keys: Hashable) -> AsyncIterator[None]:
        ordered = sorted(set(keys), key=repr)
        locks = [self._checkout(key) for key in ordered]
        try:
            async with AsyncExitStack() as stack:
                for lock in locks:
                    await stack.enter_async_context(lock)
                yield
        finally:
            for key in ordered:
                self._checkin(key)

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


class DocumentStore:
    def __init__(self, persistence: Persistence, collections: Iterable[str] = COLLECTIONS):
        self.persistence = persistence
        self.locks = LockRegistry()
        self._data: Dict[str, Dict[int, Document]] = {name: {} for name in collections}
        self._counters: Dict[str, int] = {name: 0 for name in collections}

    async def load(self) -> None:
        """Read every collection from the backend into memory."""
        for name in self._data:
            docs = await self.persistence.load(name)
            self._data[name] = {int(k): v for k, v in docs.items()}
            self._counters[name] = max(self._data[name], default=0)
            log.info("Loaded %s %s documents", len(docs), name)

    def _collection(self, name: str) -> Dict[int, Document]:
        try:
            return self._data[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    def get(self, collection: str, doc_id: int) -> Optional[Document]:
        doc = self._collection(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def all(self, collection: str) -> List[Document]:
        docs = self._collection(collection)
        return [copy.deepcopy(docs[k]) for k in sorted(docs)]

    def find(self, collection: str, field: str, value: Any) -> Optional[Document]:
        for doc_id in sorted(self._collection(collection)):
            doc = self._data[collection][doc_id]
            if doc.get(field) == value:
                return copy.deepcopy(doc)
        return None

    def next_id(self, collection: str) -> int:
        """Allocate a monotonic id; ids of deleted documents are never reused."""
        current = max(self._counters[collection], max(self._collection(collection), default=0))
        self._counters[collection] = current + 1
        return current + 1

    async def put(self, collection: str, doc_id: int, doc: Document) -> None:
        snapshot = copy.deepcopy(doc)
        await self.persistence.save(collection, doc_id, snapshot)
        self._collection(collection)[doc_id] = snapshot

    async def put_many(self, writes: Sequence[Write]) -> None:
        """Write several documents as one unit.

        Each document goes to the backend in order. If one save fails, the
        documents already saved are restored to their previous backend state
        and the error is re-raised; memory is only swapped once all succeed.
        """
        staged = [(c, i, copy.deepcopy(d)) for c, i, d in writes]
        done: List[Tuple[str, int]] = []
        try:
            for collection, doc_id, doc in staged:
                self._collection(collection)
                await self.persistence.save(collection, doc_id, doc)
                done.append((collection, doc_id))
        except Exception:
            await self._restore(done)
            raise
        for collection, doc_id, doc in staged:
            self._data[collection][doc_id] = doc

    async def _restore(self, written: List[Tuple[str, int]]) -> None:
        for collection, doc_id in reversed(written):
            previous = self._data[collection].get(doc_id)
            try:
                if previous is None:
                    await self.persistence.delete(collection, doc_id)
                else:
                    await self.persistence.save(collection, doc_id, copy.deepcopy(previous))
            except Exception as exc:
                log.error("Rollback of %s/%s failed: %s", collection, doc_id, exc)

    async def remove(self, collection: str, doc_id: int) -> bool:
        if doc_id not in self._collection(collection):
            return False
        await self.persistence.delete(collection, doc_id)
        self._data[collection].pop(doc_id, None)
        return True
