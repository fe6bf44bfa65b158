"""REST endpoints for the quest lifecycle: post, accept, leave, complete, delete."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

import tavno.api.deps as deps
from tavno.api.errors import http_error
from tavno.api.mappers import quest_to_api
from tavno.api.schemas import Quest, QuestComplete, SuccessOut
from tavno.api.security import get_current_user, get_optional_user
from tavno.domain.errors import DomainError
from tavno.domain.models.UserModel import User
from tavno.domain.usecase import quests as quest_usecases

router = APIRouter(prefix="/quests", tags=["Quests"])


def _viewer_id(user: Optional[User]) -> Optional[int]:
    return user.user_id if user is not None else None


@router.get("", response_model=List[Quest])
async def list_quests(
    category: Optional[str] = None,
    q: Optional[str] = None,
    viewer: Optional[User] = Depends(get_optional_user),
) -> List[Quest]:
    """List quests, optionally filtered by category and a free-text query."""
    usecase = quest_usecases.ListQuests(quests_repo=deps.quests_repo)
    quests = await usecase.execute(category=category, q=q)
    return [quest_to_api(quest, _viewer_id(viewer)) for quest in quests]


@router.get("/{quest_id}", response_model=Quest)
async def get_quest(
    quest_id: str, viewer: Optional[User] = Depends(get_optional_user)
) -> Quest:
    """Fetch a quest by its identifier."""
    try:
        usecase = quest_usecases.GetQuest(quests_repo=deps.quests_repo)
        quest = await usecase.execute(quest_id)
    except DomainError as err:
        raise http_error(err) from err
    return quest_to_api(quest, _viewer_id(viewer))


@router.post("", response_model=Quest, status_code=201)
async def create_quest(
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    reward: Optional[str] = Form(default="0"),
    duration: Optional[str] = Form(default=None),
    location: Optional[str] = Form(default=None),
    slots: Optional[str] = Form(default="1"),
    conditions: Optional[str] = Form(default=None),
    creator_phone: Optional[str] = Form(default=None, alias="creatorPhone"),
    image: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
) -> Quest:
    """Post a new quest; the caller becomes its creator."""
    upload = None
    if image is not None and image.filename:
        upload = quest_usecases.QuestImage(
            filename=image.filename, content=await image.read()
        )
    try:
        usecase = quest_usecases.CreateQuest(
            quests_repo=deps.quests_repo,
            users_repo=deps.users_repo,
            events=deps.broadcaster,
            assets=deps.assets,
        )
        quest = await usecase.execute(
            user.user_id,
            title=title,
            description=description,
            category=category,
            reward=reward,
            duration=duration,
            location=location,
            slots=slots,
            conditions=conditions,
            creator_phone=creator_phone,
            image=upload,
        )
    except DomainError as err:
        raise http_error(err) from err
    return quest_to_api(quest, user.user_id)


@router.post("/{quest_id}/accept", response_model=Quest)
async def accept_quest(quest_id: str, user: User = Depends(get_current_user)) -> Quest:
    """Take one slot on a quest."""
    try:
        usecase = quest_usecases.AcceptQuest(
            quests_repo=deps.quests_repo,
            users_repo=deps.users_repo,
            locks=deps.store.locks,
            events=deps.broadcaster,
            uow=deps.uow,
        )
        quest = await usecase.execute(user.user_id, quest_id)
    except DomainError as err:
        raise http_error(err) from err
    return quest_to_api(quest, user.user_id)


@router.post("/{quest_id}/leave", response_model=Quest)
async def leave_quest(quest_id: str, user: User = Depends(get_current_user)) -> Quest:
    """Give up a previously accepted slot."""
    try:
        usecase = quest_usecases.LeaveQuest(
            quests_repo=deps.quests_repo,
            users_repo=deps.users_repo,
            locks=deps.store.locks,
            events=deps.broadcaster,
            uow=deps.uow,
        )
        quest = await usecase.execute(user.user_id, quest_id)
    except DomainError as err:
        raise http_error(err) from err
    return quest_to_api(quest, user.user_id)


@router.post("/{quest_id}/complete", response_model=Quest)
async def complete_quest(
    quest_id: str,
    body: Optional[QuestComplete] = None,
    user: User = Depends(get_current_user),
) -> Quest:
    """Confirm completion with the key handed over by the creator."""
    try:
        usecase = quest_usecases.CompleteQuest(
            quests_repo=deps.quests_repo,
            users_repo=deps.users_repo,
            locks=deps.store.locks,
            events=deps.broadcaster,
            uow=deps.uow,
            auditor=deps.auditor,
        )
        quest = await usecase.execute(user.user_id, quest_id, body.key if body else "")
    except DomainError as err:
        raise http_error(err) from err
    return quest_to_api(quest, user.user_id)


@router.delete("/{quest_id}", response_model=SuccessOut)
async def delete_quest(quest_id: str, user: User = Depends(get_current_user)) -> SuccessOut:
    """Remove a quest; only its creator may do so."""
    try:
        usecase = quest_usecases.DeleteQuest(
            quests_repo=deps.quests_repo,
            locks=deps.store.locks,
            events=deps.broadcaster,
            assets=deps.assets,
        )
        await usecase.execute(user.user_id, quest_id)
    except DomainError as err:
        raise http_error(err) from err
    return SuccessOut(success=True)
