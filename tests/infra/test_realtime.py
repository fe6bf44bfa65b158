import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from tavno.api.mappers import quest_event_payload
from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase.ports import QuestEventType
from tavno.infra.realtime import Broadcaster

pytestmark = pytest.mark.asyncio


class FakeWebSocket:
    def __init__(self, block_sends: bool = False):
        self.accepted = False
        self.sent = []
        self.closed_with = None
        self.sending = False
        self._block_sends = block_sends
        self._gone = asyncio.Event()

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        self.sending = True
        if self._block_sends:
            await asyncio.Event().wait()
        self.sent.append(message)

    async def receive_text(self):
        await self._gone.wait()
        raise WebSocketDisconnect(code=1000)

    async def close(self, code=1000):
        self.closed_with = code

    def disconnect(self):
        self._gone.set()


async def _until(predicate, attempts: int = 200):
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


def _quest() -> Quest:
    quest = Quest(quest_id=1, title="T", description="D", category="C", creator_id=1)
    quest.accept(2)
    return quest


async def test_publish_without_subscribers_is_noop():
    Broadcaster(quest_event_payload).publish(QuestEventType.QUEST_DELETED, {"id": 1})


async def test_serve_delivers_events_without_completion_key():
    broadcaster = Broadcaster(quest_event_payload)
    ws = FakeWebSocket()
    task = asyncio.create_task(broadcaster.serve(ws))
    await _until(lambda: broadcaster.subscriber_count == 1)

    broadcaster.publish(QuestEventType.QUEST_UPDATED, _quest())
    broadcaster.publish(QuestEventType.QUEST_DELETED, {"id": 1})
    await _until(lambda: len(ws.sent) == 2)

    assert ws.accepted
    assert ws.sent[0]["type"] == "QUEST_UPDATED"
    assert ws.sent[0]["payload"]["id"] == 1
    assert ws.sent[0]["payload"]["accepted"] == [2]
    assert ws.sent[0]["payload"]["completionKey"] is None
    assert ws.sent[1] == {"type": "QUEST_DELETED", "payload": {"id": 1}}

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1)
    assert broadcaster.subscriber_count == 0
    assert ws.closed_with is None


async def test_full_queue_drops_subscriber():
    broadcaster = Broadcaster(quest_event_payload, queue_size=1)
    subscriber = broadcaster.subscribe()

    broadcaster.publish(QuestEventType.QUEST_DELETED, {"id": 1})
    broadcaster.publish(QuestEventType.QUEST_DELETED, {"id": 2})

    assert subscriber.dropped is True
    assert broadcaster.subscriber_count == 0


async def test_slow_socket_is_closed_and_others_keep_receiving():
    broadcaster = Broadcaster(quest_event_payload, queue_size=1)
    slow, fast = FakeWebSocket(block_sends=True), FakeWebSocket()
    slow_task = asyncio.create_task(broadcaster.serve(slow))
    fast_task = asyncio.create_task(broadcaster.serve(fast))
    await _until(lambda: broadcaster.subscriber_count == 2)

    broadcaster.publish(QuestEventType.QUEST_DELETED, {"id": 1})
    await _until(lambda: slow.sending and len(fast.sent) == 1)
    broadcaster.publish(QuestEventType.QUEST_DELETED, {"id": 2})
    await _until(lambda: len(fast.sent) == 2)
    broadcaster.publish(QuestEventType.QUEST_DELETED, {"id": 3})

    await asyncio.wait_for(slow_task, timeout=1)
    assert slow.closed_with == 1013
    await _until(lambda: len(fast.sent) == 3)
    assert broadcaster.subscriber_count == 1

    fast.disconnect()
    await asyncio.wait_for(fast_task, timeout=1)
