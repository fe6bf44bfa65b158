from __future__ import annotations

import logging
from dataclasses import dataclass

from tavno.domain.usecase._shared import ensure_quest, quest_key
from tavno.domain.usecase.ports import (
    AssetStore,
    EventPublisher,
    KeyedLocks,
    NotFoundError,
    QuestEventType,
    QuestsRepo,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class DeleteQuest:
    quests_repo: QuestsRepo
    locks: KeyedLocks
    events: EventPublisher
    assets: AssetStore

    async def execute(self, actor_id: int, quest_id: int | str) -> None:
        peek = await ensure_quest(self.quests_repo, quest_id)
        async with self.locks.hold(quest_key(peek.quest_id)):
            quest = await ensure_quest(self.quests_repo, peek.quest_id)
            quest.ensure_creator(actor_id)
            if not await self.quests_repo.delete(quest.quest_id):
                raise NotFoundError(f"Quest ID does not exist: {quest_id}")

        try:
            await self.assets.release(quest.image)
        except OSError as exc:
            log.warning("Failed to remove image for quest %s: %s", quest.quest_id, exc)

        log.info("Quest %s deleted by user %s", quest.quest_id, actor_id)
        self.events.publish(QuestEventType.QUEST_DELETED, {"id": quest.quest_id})
