from __future__ import annotations

import asyncio
import logging
import secrets
import time
from pathlib import Path
from typing import Optional

from tavno.infra.settings import UPLOAD_URL_PREFIX

log = logging.getLogger(__name__)


class LocalAssetStore:
    """Stores uploaded images on disk and serves them under ``/uploads/``."""

    def __init__(self, upload_dir: Path, url_prefix: str = UPLOAD_URL_PREFIX):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _unique_name(self, filename: str) -> str:
        suffix = Path(filename or "").suffix.lower()
        return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"

    def path_for(self, url: str) -> Optional[Path]:
        if not url or not url.startswith(self.url_prefix):
            return None
        name = Path(url[len(self.url_prefix) :]).name
        return self.upload_dir / name if name else None

    async def save(self, filename: str, content: bytes) -> str:
        self.ensure_dir()
        name = self._unique_name(filename)
        await asyncio.to_thread((self.upload_dir / name).write_bytes, content)
        log.info("Stored upload %s (%s bytes)", name, len(content))
        return f"{self.url_prefix}{name}"

    async def release(self, path: Optional[str]) -> bool:
        target = self.path_for(path or "")
        if target is None:
            return False
        if not await asyncio.to_thread(target.exists):
            return False
        await asyncio.to_thread(target.unlink)
        log.info("Released upload %s", target.name)
        return True
