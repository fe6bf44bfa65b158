from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase._shared import ensure_quest
from tavno.domain.usecase.ports import QuestsRepo


@dataclass(slots=True)
class GetQuest:
    quests_repo: QuestsRepo

    async def execute(self, quest_id: int | str) -> Quest:
        return await ensure_quest(self.quests_repo, quest_id)


@dataclass(slots=True)
class ListQuests:
    quests_repo: QuestsRepo

    async def execute(
        self, *, category: Optional[str] = None, q: Optional[str] = None
    ) -> List[Quest]:
        quests = await self.quests_repo.list()
        if category:
            quests = [quest for quest in quests if quest.category == category]
        if q:
            needle = q.lower()
            quests = [
                quest
                for quest in quests
                if needle in quest.title.lower() or needle in quest.description.lower()
            ]
        return sorted(quests, key=lambda quest: quest.quest_id)
