from __future__ import annotations

from typing import Any, Tuple

from tavno.domain.errors import NotFoundError, ValidationError
from tavno.domain.models.QuestModel import Quest
from tavno.domain.models.UserModel import User
from tavno.domain.usecase.ports import QuestsRepo, UsersRepo

QUESTS = "quests"
USERS = "users"


def parse_id(raw: Any, *, kind: str = "ID") -> int:
    """Return a positive integer id from raw path/body input."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {kind}: {raw!r}") from exc
    if value <= 0:
        raise ValidationError(f"Invalid {kind}: {raw!r}")
    return value


def quest_key(quest_id: int) -> Tuple[str, int]:
    return (QUESTS, quest_id)


def user_key(user_id: int) -> Tuple[str, int]:
    return (USERS, user_id)


async def ensure_quest(quests_repo: QuestsRepo, quest_id: Any) -> Quest:
    quest = await quests_repo.get(parse_id(quest_id, kind="quest ID"))
    if quest is None:
        raise NotFoundError(f"Quest ID does not exist: {quest_id}")
    return quest


async def ensure_user(users_repo: UsersRepo, user_id: Any) -> User:
    user = await users_repo.get(parse_id(user_id, kind="user ID"))
    if user is None:
        raise NotFoundError(f"User ID does not exist: {user_id}")
    return user


def require_text(value: str | None, field_name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"Missing required field: {field_name}")
    return cleaned
