"""WebSocket client for the quest event channel.

The connection is re-opened after a fixed delay whenever it closes or fails,
forever; stop it by cancelling the task running ``run_forever``.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import aiohttp

log = logging.getLogger(__name__)

RECONNECT_DELAY_SECONDS = 5.0

Event = Dict[str, Any]
EventCallback = Callable[[Event], Union[None, Awaitable[None]]]


class QuestEventSubscriber:
    def __init__(
        self,
        url: str,
        on_event: EventCallback,
        *,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.url = url
        self.on_event = on_event
        self.reconnect_delay = reconnect_delay
        self._session_factory = session_factory
        self._sleep = sleep
        self.connections = 0

    async def run_forever(self) -> None:
        while True:
            try:
                await self.listen_once()
                log.info("Quest event channel closed; reconnecting in %ss", self.reconnect_delay)
            except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
                log.warning(
                    "Quest event channel unavailable (%s); retrying in %ss",
                    exc,
                    self.reconnect_delay,
                )
            await self._sleep(self.reconnect_delay)

    async def listen_once(self) -> None:
        """Hold one connection open, dispatching events until it closes."""
        async with self._session_factory() as session:
            async with session.ws_connect(self.url) as ws:
                self.connections += 1
                log.info("Connected to quest event channel at %s", self.url)
                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        await self._dispatch(msg.data)
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        log.warning("Quest event channel error: %s", ws.exception())
                        break

    async def _dispatch(self, raw: str) -> None:
        event = _decode(raw)
        if event is None:
            return
        try:
            result = self.on_event(event)
            if inspect.isawaitable(result):
                await result
        except Exception:
            log.exception("Quest event callback failed for %s", event.get("type"))


def _decode(raw: str) -> Optional[Event]:
    try:
        event = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("Ignoring malformed quest event: %.200s", raw)
        return None
    if not isinstance(event, dict) or "type" not in event:
        log.warning("Ignoring quest event without a type: %.200s", raw)
        return None
    return event
