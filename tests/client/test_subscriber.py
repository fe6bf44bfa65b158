import json

import aiohttp
import pytest

from tavno.client.subscriber import RECONNECT_DELAY_SECONDS, QuestEventSubscriber

pytestmark = pytest.mark.asyncio


class _Stop(Exception):
    pass


class FakeMessage:
    def __init__(self, data, type=aiohttp.WSMsgType.TEXT):
        self.data = data
        self.type = type


class FakeWebSocket:
    def __init__(self, messages):
        self.messages = messages

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message

    def exception(self):
        return None


class FakeSession:
    """Each ``ws_connect`` consumes one planned outcome: an exception or a message list."""

    def __init__(self, plan):
        self.plan = list(plan)
        self.urls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def ws_connect(self, url):
        self.urls.append(url)
        outcome = self.plan.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeWebSocket(outcome)


def _sleeper(limit):
    delays = []

    async def sleep(delay):
        delays.append(delay)
        if len(delays) >= limit:
            raise _Stop()

    return sleep, delays


def _event(event_type, payload):
    return FakeMessage(json.dumps({"type": event_type, "payload": payload}))


async def test_reconnects_after_failure_and_close():
    session = FakeSession(
        [
            aiohttp.ClientConnectionError("refused"),
            [_event("QUEST_CREATED", {"id": 1}), FakeMessage("not json"), _event("QUEST_DELETED", {"id": 1})],
        ]
    )
    sleep, delays = _sleeper(limit=2)
    received = []
    subscriber = QuestEventSubscriber(
        "ws://test/ws", received.append, session_factory=lambda: session, sleep=sleep
    )

    with pytest.raises(_Stop):
        await subscriber.run_forever()

    assert [e["type"] for e in received] == ["QUEST_CREATED", "QUEST_DELETED"]
    assert delays == [RECONNECT_DELAY_SECONDS, RECONNECT_DELAY_SECONDS]
    assert session.urls == ["ws://test/ws", "ws://test/ws"]
    assert subscriber.connections == 1


async def test_async_callback_errors_do_not_break_the_stream():
    session = FakeSession([[_event("QUEST_UPDATED", {"id": 1}), _event("QUEST_UPDATED", {"id": 2})]])
    sleep, _ = _sleeper(limit=1)
    seen = []

    async def on_event(event):
        seen.append(event["payload"]["id"])
        if event["payload"]["id"] == 1:
            raise RuntimeError("boom")

    subscriber = QuestEventSubscriber(
        "ws://test/ws", on_event, session_factory=lambda: session, sleep=sleep
    )

    with pytest.raises(_Stop):
        await subscriber.run_forever()

    assert seen == [1, 2]


async def test_events_without_type_are_ignored():
    session = FakeSession([[FakeMessage(json.dumps({"payload": {}})), FakeMessage("[]")]])
    sleep, _ = _sleeper(limit=1)
    received = []
    subscriber = QuestEventSubscriber(
        "ws://test/ws", received.append, session_factory=lambda: session, sleep=sleep
    )

    with pytest.raises(_Stop):
        await subscriber.run_forever()

    assert received == []
