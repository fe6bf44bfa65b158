from tavno.domain.usecase.search.chat import ChatWithAssistant
from tavno.domain.usecase.search.recommend_quests import Recommendation, RecommendQuests

__all__ = ["ChatWithAssistant", "Recommendation", "RecommendQuests"]
