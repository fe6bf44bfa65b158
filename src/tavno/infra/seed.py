from __future__ import annotations

import logging

from tavno.domain.models.QuestModel import Quest
from tavno.domain.models.UserModel import User
from tavno.domain.usecase.ports import PasswordHasher, QuestsRepo, UsersRepo

log = logging.getLogger(__name__)

DEMO_PASSWORD = "password"


async def _ensure_user(
    users_repo: UsersRepo, hasher: PasswordHasher, *, name: str, email: str, **extra
) -> User:
    user = await users_repo.get_by_email(email)
    if user is not None:
        return user
    user = User(
        user_id=await users_repo.next_id(),
        name=name,
        email=email,
        password_hash=hasher.hash(DEMO_PASSWORD),
        **extra,
    )
    await users_repo.upsert(user)
    return user


async def seed_demo_data(
    users_repo: UsersRepo, quests_repo: QuestsRepo, hasher: PasswordHasher
) -> None:
    """Create the demo accounts and starter quests on an empty store."""
    jean = await _ensure_user(
        users_repo,
        hasher,
        name="Jean Dupont",
        email="jean@example.com",
        balance=25500,
        bio="Welcome to my profile!",
        phone="+22890000000",
    )
    alice = await _ensure_user(
        users_repo, hasher, name="Alice M.", email="alice@example.com"
    )

    if await quests_repo.list():
        return

    starters = [
        Quest(
            quest_id=await quests_repo.next_id(),
            title="Urgent parcel delivery",
            description="Deliver a parcel from Lomé centre to Agoè.",
            category="transport",
            reward=5000,
            duration="2h",
            location="Lomé → Agoè",
            creator_id=jean.user_id,
            creator=jean.name,
            creator_phone=jean.phone or None,
        ),
    ]
    starters.append(
        Quest(
            quest_id=await quests_repo.next_id(),
            title="Supermarket shopping",
            description="Do the weekly grocery shopping.",
            category="shopping",
            reward=3000,
            duration="1h",
            location="Lomé centre",
            creator_id=alice.user_id,
            creator=alice.name,
        )
    )
    for quest in starters:
        await quests_repo.upsert(quest)
    log.info("Seeded %s demo quests", len(starters))
