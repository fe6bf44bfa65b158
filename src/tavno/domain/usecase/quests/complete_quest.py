from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase._shared import ensure_quest, ensure_user, quest_key, user_key
from tavno.domain.usecase.ports import (
    ActivityAuditor,
    EventPublisher,
    KeyedLocks,
    QuestEventType,
    QuestsRepo,
    UnitOfWork,
    UsersRepo,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CompleteQuest:
    quests_repo: QuestsRepo
    users_repo: UsersRepo
    locks: KeyedLocks
    events: EventPublisher
    uow: UnitOfWork
    auditor: Optional[ActivityAuditor] = None

    async def execute(self, actor_id: int, quest_id: int | str, key: str) -> Quest:
        peek = await ensure_quest(self.quests_repo, quest_id)
        async with self.locks.hold(
            quest_key(peek.quest_id), user_key(peek.creator_id), user_key(actor_id)
        ):
            quest = await ensure_quest(self.quests_repo, peek.quest_id)
            actor = await ensure_user(self.users_repo, actor_id)

            accepted_at = quest.accepted_since(actor.user_id)
            quest.complete(actor.user_id, key)
            actor.credit(quest.reward)
            actor.notify(
                f"You completed \"{quest.title}\" and earned {quest.reward}."
            )

            touched = [actor]
            creator = await self.users_repo.get(quest.creator_id)
            if creator is not None:
                creator.notify(f"{actor.name} completed your quest \"{quest.title}\".")
                touched.append(creator)
            await self.uow.commit(quests=[quest], users=touched)

        log.info(
            "User %s completed quest %s (reward %s)",
            actor.user_id,
            quest.quest_id,
            quest.reward,
        )
        if self.auditor is not None:
            await self.auditor.record_completion(quest, actor.user_id, accepted_at)
        self.events.publish(QuestEventType.QUEST_UPDATED, quest)
        return quest
