from __future__ import annotations

import logging
from dataclasses import dataclass

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase._shared import ensure_quest, ensure_user, quest_key, user_key
from tavno.domain.usecase.ports import (
    EventPublisher,
    KeyedLocks,
    QuestEventType,
    QuestsRepo,
    UnitOfWork,
    UsersRepo,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class AcceptQuest:
    quests_repo: QuestsRepo
    users_repo: UsersRepo
    locks: KeyedLocks
    events: EventPublisher
    uow: UnitOfWork

    async def execute(self, actor_id: int, quest_id: int | str) -> Quest:
        peek = await ensure_quest(self.quests_repo, quest_id)
        async with self.locks.hold(
            quest_key(peek.quest_id), user_key(peek.creator_id), user_key(actor_id)
        ):
            quest = await ensure_quest(self.quests_repo, peek.quest_id)
            actor = await ensure_user(self.users_repo, actor_id)

            key = quest.accept(actor.user_id)

            creator = await self.users_repo.get(quest.creator_id)
            actor.notify(f"You accepted the quest \"{quest.title}\".")

            touched = [actor]
            if creator is not None:
                creator.notify(
                    f"{actor.name} accepted your quest \"{quest.title}\". "
                    f"Completion key: {key}"
                )
                touched.append(creator)
            await self.uow.commit(quests=[quest], users=touched)

        log.info(
            "User %s accepted quest %s (%s/%s slots)",
            actor.user_id,
            quest.quest_id,
            len(quest.accepted),
            quest.slots,
        )
        self.events.publish(QuestEventType.QUEST_UPDATED, quest)
        return quest


@dataclass(slots=True)
class LeaveQuest:
    quests_repo: QuestsRepo
    users_repo: UsersRepo
    locks: KeyedLocks
    events: EventPublisher
    uow: UnitOfWork

    async def execute(self, actor_id: int, quest_id: int | str) -> Quest:
        peek = await ensure_quest(self.quests_repo, quest_id)
        async with self.locks.hold(
            quest_key(peek.quest_id), user_key(peek.creator_id), user_key(actor_id)
        ):
            quest = await ensure_quest(self.quests_repo, peek.quest_id)
            actor = await ensure_user(self.users_repo, actor_id)

            quest.leave(actor.user_id)

            touched = []
            creator = await self.users_repo.get(quest.creator_id)
            if creator is not None:
                creator.notify(f"{actor.name} left your quest \"{quest.title}\".")
                touched.append(creator)
            await self.uow.commit(quests=[quest], users=touched)

        log.info("User %s left quest %s", actor.user_id, quest.quest_id)
        self.events.publish(QuestEventType.QUEST_UPDATED, quest)
        return quest
