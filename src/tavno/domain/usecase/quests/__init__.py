from tavno.domain.usecase.quests.complete_quest import CompleteQuest
from tavno.domain.usecase.quests.create_quest import CreateQuest, QuestImage
from tavno.domain.usecase.quests.delete_quest import DeleteQuest
from tavno.domain.usecase.quests.get_quest import GetQuest, ListQuests
from tavno.domain.usecase.quests.manage_participants import AcceptQuest, LeaveQuest

__all__ = [
    "CreateQuest",
    "QuestImage",
    "GetQuest",
    "ListQuests",
    "AcceptQuest",
    "LeaveQuest",
    "CompleteQuest",
    "DeleteQuest",
]
