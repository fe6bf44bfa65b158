"""Endpoints backed by the text-generation collaborator."""

from fastapi import APIRouter

import tavno.api.deps as deps
from tavno.api.errors import http_error
from tavno.api.mappers import quest_to_api
from tavno.api.schemas import AiSearchIn, AiSearchOut, ChatIn, ChatOut
from tavno.domain.errors import DomainError
from tavno.domain.usecase.search import ChatWithAssistant, RecommendQuests

router = APIRouter(tags=["AI"])


@router.post("/search/ai", response_model=AiSearchOut)
async def ai_search(body: AiSearchIn) -> AiSearchOut:
    try:
        usecase = RecommendQuests(quests_repo=deps.quests_repo, generator=deps.generator)
        result = await usecase.execute(body.query)
    except DomainError as err:
        raise http_error(err) from err
    return AiSearchOut(
        quests=[quest_to_api(quest) for quest in result.quests],
        suggestion=result.suggestion,
        reasoning=result.reasoning,
    )


@router.post("/ai/chat", response_model=ChatOut)
async def ai_chat(body: ChatIn) -> ChatOut:
    try:
        reply = await ChatWithAssistant(generator=deps.generator).execute(body.message)
    except DomainError as err:
        raise http_error(err) from err
    return ChatOut(reply=reply)
