import asyncio

import pytest

from tavno.domain.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from tavno.domain.models.QuestModel import QuestStatus
from tavno.domain.usecase.ports import QuestEventType
from tavno.domain.usecase.quests import (
    AcceptQuest,
    CompleteQuest,
    CreateQuest,
    DeleteQuest,
    GetQuest,
    LeaveQuest,
    ListQuests,
    QuestImage,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def accept(quests_repo, users_repo, store, events, uow):
    return AcceptQuest(
        quests_repo=quests_repo,
        users_repo=users_repo,
        locks=store.locks,
        events=events,
        uow=uow,
    )


@pytest.fixture()
def leave(quests_repo, users_repo, store, events, uow):
    return LeaveQuest(
        quests_repo=quests_repo,
        users_repo=users_repo,
        locks=store.locks,
        events=events,
        uow=uow,
    )


@pytest.fixture()
def complete(quests_repo, users_repo, store, events, uow):
    return CompleteQuest(
        quests_repo=quests_repo,
        users_repo=users_repo,
        locks=store.locks,
        events=events,
        uow=uow,
    )


class RecordingAuditor:
    def __init__(self):
        self.calls = []

    async def record_completion(self, quest, user_id, accepted_at):
        self.calls.append((quest.quest_id, user_id, accepted_at))


# ─────────────────────────────────────────────────────────────
# Create / read
# ─────────────────────────────────────────────────────────────
async def test_create_quest_persists_and_publishes(quests_repo, users_repo, events, assets, add_user):
    alice = await add_user("Alice", phone="0600")
    usecase = CreateQuest(quests_repo=quests_repo, users_repo=users_repo, events=events, assets=assets)

    quest = await usecase.execute(
        alice.user_id,
        title="  Fix a bike  ",
        description="Flat tyre",
        category="Repairs",
        reward="250",
        slots="2",
        image=QuestImage(filename="bike.png", content=b"png"),
    )

    stored = await quests_repo.get(quest.quest_id)
    assert stored is not None
    assert stored.title == "Fix a bike"
    assert stored.reward == 250 and stored.slots == 2
    assert stored.creator == "Alice"
    assert stored.status is QuestStatus.OPEN
    assert stored.image in assets.saved
    assert events.types == [QuestEventType.QUEST_CREATED]


async def test_create_quest_requires_title(quests_repo, users_repo, events, assets, add_user):
    alice = await add_user("Alice")
    usecase = CreateQuest(quests_repo=quests_repo, users_repo=users_repo, events=events, assets=assets)

    with pytest.raises(ValidationError):
        await usecase.execute(alice.user_id, title=" ", description="d", category="c")

    assert await quests_repo.list() == []
    assert events.events == []


async def test_get_missing_quest_is_not_found(quests_repo):
    with pytest.raises(NotFoundError):
        await GetQuest(quests_repo=quests_repo).execute(404)


async def test_list_filters_by_category_and_text(quests_repo, add_user, add_quest):
    alice = await add_user("Alice")
    await add_quest(alice, title="Dog walking", category="Pets")
    await add_quest(alice, title="Paint fence", description="White paint", category="Home")
    await add_quest(alice, title="Cat sitting", category="Pets")

    usecase = ListQuests(quests_repo=quests_repo)
    assert [q.title for q in await usecase.execute(category="Pets")] == ["Dog walking", "Cat sitting"]
    assert [q.title for q in await usecase.execute(q="PAINT")] == ["Paint fence"]
    assert len(await usecase.execute()) == 3


# ─────────────────────────────────────────────────────────────
# Accept
# ─────────────────────────────────────────────────────────────
async def test_accept_notifies_both_sides_with_key_for_creator(accept, users_repo, events, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    quest = await add_quest(alice, slots=1)

    updated = await accept.execute(bob.user_id, quest.quest_id)

    assert updated.accepted == [bob.user_id]
    assert updated.status is QuestStatus.FULL
    creator = await users_repo.get(alice.user_id)
    assert creator.notifications[-1].message.endswith(f"Completion key: {updated.completion_key}")
    acceptor = await users_repo.get(bob.user_id)
    assert "Completion key" not in acceptor.notifications[-1].message
    assert events.types == [QuestEventType.QUEST_UPDATED]


async def test_accept_own_quest_conflicts(accept, add_user, add_quest, events):
    alice = await add_user("Alice")
    quest = await add_quest(alice)
    with pytest.raises(ConflictError):
        await accept.execute(alice.user_id, quest.quest_id)
    assert events.events == []


async def test_concurrent_accepts_never_overfill(accept, quests_repo, add_user, add_quest):
    alice = await add_user("Alice")
    takers = [await add_user(f"Taker{i}") for i in range(6)]
    quest = await add_quest(alice, slots=2)

    results = await asyncio.gather(
        *(accept.execute(user.user_id, quest.quest_id) for user in takers),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 2
    assert all(isinstance(f, ConflictError) for f in failures)
    stored = await quests_repo.get(quest.quest_id)
    assert len(stored.accepted) == 2
    assert stored.status is QuestStatus.FULL


# ─────────────────────────────────────────────────────────────
# Leave
# ─────────────────────────────────────────────────────────────
async def test_leave_reopens_and_notifies_creator(accept, leave, users_repo, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    carol = await add_user("Carol")
    quest = await add_quest(alice, slots=2)
    await accept.execute(bob.user_id, quest.quest_id)
    await accept.execute(carol.user_id, quest.quest_id)

    updated = await leave.execute(carol.user_id, quest.quest_id)

    assert updated.accepted == [bob.user_id]
    assert updated.status is QuestStatus.OPEN
    creator = await users_repo.get(alice.user_id)
    assert creator.notifications[-1].message == 'Carol left your quest "Water the plants".'


async def test_leave_without_accepting_conflicts(leave, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    quest = await add_quest(alice)
    with pytest.raises(ConflictError):
        await leave.execute(bob.user_id, quest.quest_id)


# ─────────────────────────────────────────────────────────────
# Complete
# ─────────────────────────────────────────────────────────────
async def test_complete_credits_reward_and_audits(quests_repo, users_repo, store, events, uow, accept, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob", balance=5)
    quest = await add_quest(alice, reward=120)
    key = (await accept.execute(bob.user_id, quest.quest_id)).completion_key
    auditor = RecordingAuditor()
    usecase = CompleteQuest(
        quests_repo=quests_repo,
        users_repo=users_repo,
        locks=store.locks,
        events=events,
        uow=uow,
        auditor=auditor,
    )

    done = await usecase.execute(bob.user_id, quest.quest_id, key)

    assert done.status is QuestStatus.COMPLETED
    assert done.completed_by == bob.user_id
    assert done.completion_key is None
    assert (await users_repo.get(bob.user_id)).balance == 125
    assert len(auditor.calls) == 1 and auditor.calls[0][1] == bob.user_id
    assert auditor.calls[0][2] is not None
    creator = await users_repo.get(alice.user_id)
    assert creator.notifications[-1].message == 'Bob completed your quest "Water the plants".'


async def test_complete_with_wrong_key_leaves_state(complete, accept, quests_repo, users_repo, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    quest = await add_quest(alice)
    key = (await accept.execute(bob.user_id, quest.quest_id)).completion_key

    with pytest.raises(ValidationError):
        await complete.execute(bob.user_id, quest.quest_id, key.lower() + "X")

    stored = await quests_repo.get(quest.quest_id)
    assert stored.status is QuestStatus.FULL
    assert stored.completion_key == key
    assert (await users_repo.get(bob.user_id)).balance == 0


async def test_complete_by_outsider_forbidden(complete, accept, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    eve = await add_user("Eve")
    quest = await add_quest(alice)
    key = (await accept.execute(bob.user_id, quest.quest_id)).completion_key

    with pytest.raises(ForbiddenError):
        await complete.execute(eve.user_id, quest.quest_id, key)


async def test_any_participant_with_latest_key_may_complete(complete, accept, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    carol = await add_user("Carol")
    quest = await add_quest(alice, slots=2)
    await accept.execute(bob.user_id, quest.quest_id)
    latest = (await accept.execute(carol.user_id, quest.quest_id)).completion_key

    done = await complete.execute(bob.user_id, quest.quest_id, latest)

    assert done.completed_by == bob.user_id


# ─────────────────────────────────────────────────────────────
# Delete
# ─────────────────────────────────────────────────────────────
async def test_delete_requires_creator_then_succeeds(quests_repo, store, events, assets, add_user, add_quest):
    alice = await add_user("Alice")
    bob = await add_user("Bob")
    image = await assets.save("fence.png", b"img")
    quest = await add_quest(alice, image=image)
    usecase = DeleteQuest(quests_repo=quests_repo, locks=store.locks, events=events, assets=assets)

    with pytest.raises(ForbiddenError):
        await usecase.execute(bob.user_id, quest.quest_id)
    assert await quests_repo.get(quest.quest_id) is not None

    await usecase.execute(alice.user_id, quest.quest_id)

    assert await quests_repo.get(quest.quest_id) is None
    assert assets.released == [image]
    assert events.events == [(QuestEventType.QUEST_DELETED, {"id": quest.quest_id})]


async def test_deleted_ids_are_not_reused(quests_repo, store, events, assets, add_user, add_quest):
    alice = await add_user("Alice")
    first = await add_quest(alice)
    await DeleteQuest(quests_repo=quests_repo, locks=store.locks, events=events, assets=assets).execute(
        alice.user_id, first.quest_id
    )
    second = await add_quest(alice)
    assert second.quest_id > first.quest_id
