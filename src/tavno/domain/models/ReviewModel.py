from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from tavno.domain.errors import ValidationError

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Review:
    review_id: int
    quest_id: int
    from_user_id: int
    to_user_id: int
    rating: int
    comment: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not MIN_RATING <= int(self.rating) <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        self.rating = int(self.rating)
        self.comment = self.comment or ""
