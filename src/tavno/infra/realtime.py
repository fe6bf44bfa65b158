"""Fan-out of quest lifecycle events to connected WebSocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Set

from starlette.websockets import WebSocket, WebSocketDisconnect

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase.ports import QuestEventType

log = logging.getLogger(__name__)

QuestEncoder = Callable[[Quest], Dict[str, Any]]


class Subscriber:
    def __init__(self, queue_size: int):
        self.queue: asyncio.Queue[Dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self.sender: Optional[asyncio.Task[None]] = None
        self.dropped = False


class Broadcaster:
    """Best-effort publisher: ``publish`` never awaits a socket.

    Each subscriber owns a bounded queue drained by its own sender task. A
    subscriber that falls behind far enough to fill its queue is dropped;
    clients are expected to reconnect.
    """

    def __init__(self, encoder: QuestEncoder, queue_size: int = 100):
        self.encoder = encoder
        self.queue_size = queue_size
        self._subscribers: Set[Subscriber] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscriber:
        subscriber = Subscriber(self.queue_size)
        self._subscribers.add(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.discard(subscriber)

    def _drop(self, subscriber: Subscriber) -> None:
        subscriber.dropped = True
        self.unsubscribe(subscriber)
        if subscriber.sender is not None:
            subscriber.sender.cancel()

    def publish(
        self, event_type: QuestEventType, payload: Quest | Dict[str, Any]
    ) -> None:
        body = self.encoder(payload) if isinstance(payload, Quest) else dict(payload)
        message = {"type": event_type.value, "payload": body}
        for subscriber in list(self._subscribers):
            try:
                subscriber.queue.put_nowait(message)
            except asyncio.QueueFull:
                log.warning("Dropping slow real-time subscriber (queue full)")
                self._drop(subscriber)
        log.debug("Published %s to %s subscribers", event_type.value, len(self._subscribers))

    async def _pump(self, websocket: WebSocket, subscriber: Subscriber) -> None:
        while True:
            message = await subscriber.queue.get()
            await websocket.send_json(message)

    async def _drain_client(self, websocket: WebSocket) -> None:
        # Clients do not send anything meaningful; reading detects disconnects.
        while True:
            await websocket.receive_text()

    async def serve(self, websocket: WebSocket) -> None:
        """Run one WebSocket connection until the client leaves or is dropped."""
        await websocket.accept()
        subscriber = self.subscribe()
        subscriber.sender = asyncio.create_task(self._pump(websocket, subscriber))
        reader = asyncio.create_task(self._drain_client(websocket))
        log.info("Real-time subscriber connected (%s total)", self.subscriber_count)
        try:
            done, _ = await asyncio.wait(
                {subscriber.sender, reader}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                if task.cancelled():
                    continue
                exc = task.exception()
                if exc is not None and not isinstance(exc, WebSocketDisconnect):
                    log.warning("Real-time connection failed: %s", exc)
        finally:
            self.unsubscribe(subscriber)
            for task in (subscriber.sender, reader):
                task.cancel()
            await asyncio.gather(subscriber.sender, reader, return_exceptions=True)
            if subscriber.dropped:
                try:
                    await websocket.close(code=1013)
                except RuntimeError:
                    log.debug("WebSocket already closed")
            log.info("Real-time subscriber disconnected (%s left)", self.subscriber_count)
