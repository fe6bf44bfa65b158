from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from tavno.domain.models.ReviewModel import Review
from tavno.domain.models.UserModel import User
from tavno.domain.usecase._shared import ensure_user
from tavno.domain.usecase.ports import ReviewsRepo, UsersRepo


@dataclass(slots=True)
class GetUser:
    users_repo: UsersRepo

    async def execute(self, user_id: int | str) -> User:
        return await ensure_user(self.users_repo, user_id)


@dataclass
class PublicProfile:
    user: User
    # (review, reviewer display name)
    reviews: List[Tuple[Review, str]] = field(default_factory=list)

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def avg_rating(self) -> float:
        if not self.reviews:
            return 0.0
        return round(sum(r.rating for r, _ in self.reviews) / len(self.reviews), 2)


@dataclass(slots=True)
class GetPublicProfile:
    users_repo: UsersRepo
    reviews_repo: ReviewsRepo

    async def execute(self, user_id: int | str) -> PublicProfile:
        user = await ensure_user(self.users_repo, user_id)
        received = await self.reviews_repo.list_for_user(user.user_id)

        names: dict[int, str] = {}
        entries: List[Tuple[Review, str]] = []
        for review in sorted(received, key=lambda r: r.created_at, reverse=True):
            if review.from_user_id not in names:
                author = await self.users_repo.get(review.from_user_id)
                names[review.from_user_id] = author.name if author else "Unknown"
            entries.append((review, names[review.from_user_id]))

        return PublicProfile(user=user, reviews=entries)
