"""Append-only JSON-lines audit of suspicious quest completions."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase.ports import QuestsRepo

log = logging.getLogger(__name__)

QUEST_COMPLETION_TIME = "QUEST_COMPLETION_TIME"
SPAM_QUEST_COMPLETION = "SPAM_QUEST_COMPLETION"


class SuspiciousActivityLog:
    def __init__(
        self,
        log_file: Path,
        quests_repo: QuestsRepo,
        *,
        min_completion_seconds: int = 60,
        spam_limit: int = 5,
        spam_window_seconds: int = 3600,
    ):
        self.log_file = Path(log_file)
        self.quests_repo = quests_repo
        self.min_completion_seconds = min_completion_seconds
        self.spam_limit = spam_limit
        self.spam_window_seconds = spam_window_seconds

    def _append(self, line: str) -> None:
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with self.log_file.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    async def log_activity(self, kind: str, data: Dict[str, Any]) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "type": kind,
            "data": data,
        }
        log.warning("Suspicious activity %s: %s", kind, data)
        try:
            await asyncio.to_thread(self._append, json.dumps(entry, ensure_ascii=False))
        except OSError as exc:
            log.error("Failed to write to suspicious activity log: %s", exc)

    async def record_completion(
        self, quest: Quest, user_id: int, accepted_at: Optional[datetime]
    ) -> None:
        completed_at = quest.completed_at or datetime.now(timezone.utc)

        if accepted_at is not None:
            elapsed = (completed_at - accepted_at).total_seconds()
            if elapsed < self.min_completion_seconds:
                await self.log_activity(
                    QUEST_COMPLETION_TIME,
                    {
                        "questId": quest.quest_id,
                        "userId": user_id,
                        "secondsSinceAccept": round(elapsed, 3),
                    },
                )

        window_start = completed_at - timedelta(seconds=self.spam_window_seconds)
        recent = [
            q
            for q in await self.quests_repo.list()
            if q.completed_by == user_id
            and q.completed_at is not None
            and q.completed_at >= window_start
        ]
        if len(recent) > self.spam_limit:
            await self.log_activity(
                SPAM_QUEST_COMPLETION,
                {
                    "userId": user_id,
                    "completions": len(recent),
                    "windowSeconds": self.spam_window_seconds,
                },
            )

    async def read(self) -> str:
        if not self.log_file.exists():
            return ""
        return await asyncio.to_thread(self.log_file.read_text, encoding="utf-8")
