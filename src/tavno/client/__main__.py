from __future__ import annotations

import asyncio
import json
import logging
import os

from tavno.client.subscriber import QuestEventSubscriber
from tavno.core.logging import configure_logging

log = logging.getLogger("tavno.client")


def _print_event(event: dict) -> None:
    print(json.dumps(event, ensure_ascii=False))


def main() -> None:
    configure_logging(log_file_name="client.log", extra_loggers=())
    url = os.getenv("TAVNO_WS_URL", "ws://localhost:8000/ws")
    subscriber = QuestEventSubscriber(url, _print_event)
    try:
        asyncio.run(subscriber.run_forever())
    except KeyboardInterrupt:
        log.info("Subscriber stopped")


if __name__ == "__main__":
    main()
