from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase._shared import ensure_user, require_text
from tavno.domain.usecase.ports import (
    AssetStore,
    EventPublisher,
    QuestEventType,
    QuestsRepo,
    UsersRepo,
)

log = logging.getLogger(__name__)


def _coerce_int(value: object, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass(slots=True)
class QuestImage:
    filename: str
    content: bytes


@dataclass(slots=True)
class CreateQuest:
    quests_repo: QuestsRepo
    users_repo: UsersRepo
    events: EventPublisher
    assets: AssetStore

    async def execute(
        self,
        actor_id: int,
        *,
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        reward: object = 0,
        duration: Optional[str] = None,
        location: Optional[str] = None,
        slots: object = 1,
        conditions: Optional[str] = None,
        creator_phone: Optional[str] = None,
        image: Optional[QuestImage] = None,
    ) -> Quest:
        creator = await ensure_user(self.users_repo, actor_id)

        title = require_text(title, "title")
        description = require_text(description, "description")
        category = require_text(category, "category")

        image_path = None
        if image is not None and image.content:
            image_path = await self.assets.save(image.filename, image.content)

        quest = Quest(
            quest_id=await self.quests_repo.next_id(),
            title=title,
            description=description,
            category=category,
            creator_id=creator.user_id,
            creator=creator.name,
            creator_phone=creator_phone or None,
            reward=max(0, _coerce_int(reward, 0)),
            duration=duration or "",
            location=location or "",
            conditions=conditions or None,
            image=image_path,
            slots=max(1, _coerce_int(slots, 1)),
        )

        try:
            await self.quests_repo.upsert(quest)
        except Exception:
            await self.assets.release(image_path)
            raise

        log.info("Quest %s created by user %s", quest.quest_id, creator.user_id)
        self.events.publish(QuestEventType.QUEST_CREATED, quest)
        return quest
