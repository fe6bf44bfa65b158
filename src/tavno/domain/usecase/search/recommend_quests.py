from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from tavno.domain.models.QuestModel import Quest
from tavno.domain.usecase.ports import (
    QuestsRepo,
    TextGenerator,
    UpstreamError,
    ValidationError,
)

log = logging.getLogger(__name__)

RECOMMEND_PROMPT = """You are a quest recommendation engine. A user is searching for quests with the following query: "{query}"

Here is the list of available quests:
{catalogue}

Based on the user's query, recommend the most relevant quests by their IDs. Also suggest what the user might be looking for if their query is vague.
Respond in JSON format: {{"recommendedIds": [1,2,3], "suggestion": "Your helpful suggestion", "reasoning": "Why these quests match"}}
Respond ONLY with valid JSON, no markdown or extra text."""


@dataclass
class Recommendation:
    quests: List[Quest] = field(default_factory=list)
    suggestion: str = ""
    reasoning: str = ""


def _catalogue(quests: List[Quest]) -> str:
    rows = [
        {
            "id": q.quest_id,
            "title": q.title,
            "description": q.description,
            "category": q.category,
            "reward": q.reward,
            "location": q.location,
        }
        for q in quests
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False)


def _parse_reply(text: str) -> Dict[str, Any]:
    cleaned = text.strip()
    # Models sometimes wrap JSON in a fenced block despite the instructions.
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise UpstreamError(f"Failed to parse AI response: {text[:200]}") from exc
    if not isinstance(parsed, dict):
        raise UpstreamError("AI response is not a JSON object")
    return parsed


@dataclass(slots=True)
class RecommendQuests:
    quests_repo: QuestsRepo
    generator: TextGenerator

    async def execute(self, query: str | None) -> Recommendation:
        query = (query or "").strip()
        if not query:
            raise ValidationError("Query required")

        quests = sorted(await self.quests_repo.list(), key=lambda q: q.quest_id)
        prompt = RECOMMEND_PROMPT.format(query=query, catalogue=_catalogue(quests))
        parsed = _parse_reply(await self.generator.generate(prompt))

        raw_ids = parsed.get("recommendedIds") or []
        wanted = set()
        for raw in raw_ids if isinstance(raw_ids, list) else []:
            try:
                wanted.add(int(raw))
            except (TypeError, ValueError):
                log.debug("Ignoring non-numeric recommended id %r", raw)

        return Recommendation(
            quests=[q for q in quests if q.quest_id in wanted],
            suggestion=str(parsed.get("suggestion") or ""),
            reasoning=str(parsed.get("reasoning") or ""),
        )
