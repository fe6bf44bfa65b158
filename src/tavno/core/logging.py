from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable

_CONFIGURED = False


class JsonFormatter(logging.Formatter):
    """Serialize log records as structured JSON."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_info"] = record.stack_info
        return json.dumps(data, ensure_ascii=False)


def configure_logging(
    log_file_name: str = "api.log",
    extra_loggers: Iterable[str] = ("uvicorn", "uvicorn.access", "uvicorn.error"),
) -> None:
    """Configure root logging handlers once for the API runtime."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_dir_env = os.getenv("LOG_DIR")
    log_dir = Path(log_dir_env) if log_dir_env else Path.cwd() / "logs"

    log_format = os.getenv("LOG_FORMAT", "").strip().lower()
    level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    level = getattr(logging, level_name, logging.INFO)

    if log_format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logging.warning("Unable to create log directory %s: %s", log_dir, exc)
    else:
        file_handler = logging.FileHandler(log_dir / log_file_name, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in extra_loggers:
        named = logging.getLogger(name)
        named.handlers = []
        named.propagate = True

    logging.getLogger(__name__).info("API logging active in %s", log_dir)
    _CONFIGURED = True


__all__ = ["JsonFormatter", "configure_logging"]
