from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tavno.domain.models.ReviewModel import Review
from tavno.domain.usecase._shared import ensure_quest, parse_id, quest_key, user_key
from tavno.domain.usecase.ports import (
    ForbiddenError,
    KeyedLocks,
    QuestsRepo,
    ReviewsRepo,
    UnitOfWork,
    UsersRepo,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SubmitReview:
    quests_repo: QuestsRepo
    reviews_repo: ReviewsRepo
    users_repo: UsersRepo
    locks: KeyedLocks
    uow: UnitOfWork

    async def execute(
        self,
        actor_id: int,
        *,
        quest_id: int | str,
        target_user_id: int | str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        target_id = parse_id(target_user_id, kind="user ID")
        peek = await ensure_quest(self.quests_repo, quest_id)

        async with self.locks.hold(quest_key(peek.quest_id), user_key(target_id)):
            quest = await ensure_quest(self.quests_repo, peek.quest_id)
            side = quest.review_side(actor_id)
            if quest.counterparty(actor_id) != target_id:
                raise ForbiddenError("Reviews can only target the other participant")

            review = Review(
                review_id=await self.reviews_repo.next_id(),
                quest_id=quest.quest_id,
                from_user_id=actor_id,
                to_user_id=target_id,
                rating=rating,
                comment=comment or "",
            )
            quest.mark_reviewed(side)

            touched = []
            target = await self.users_repo.get(target_id)
            if target is not None:
                target.notify(
                    f"You received a {review.rating}-star review for \"{quest.title}\"."
                )
                touched.append(target)
            await self.uow.commit(quests=[quest], users=touched, reviews=[review])

        log.info(
            "User %s reviewed user %s on quest %s", actor_id, target_id, quest.quest_id
        )
        return review
