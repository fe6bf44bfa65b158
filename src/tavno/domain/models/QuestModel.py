from __future__ import annotations

import random
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from tavno.domain.errors import ConflictError, ForbiddenError, ValidationError

COMPLETION_KEY_LENGTH = 6


class QuestStatus(str, Enum):
    OPEN = "open"
    FULL = "full"
    COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_completion_key() -> str:
    """Return a short code alternating letters and digits (e.g. ``K4T9B2``)."""
    rng = random.SystemRandom()
    return "".join(
        rng.choice(string.ascii_uppercase) if index % 2 == 0 else rng.choice(string.digits)
        for index in range(COMPLETION_KEY_LENGTH)
    )


@dataclass
class QuestReviews:
    creator_reviewed: bool = False
    completer_reviewed: bool = False


@dataclass
class Quest:
    # Identity / owner
    quest_id: int
    title: str
    description: str
    category: str
    creator_id: int
    creator: str = ""
    creator_phone: Optional[str] = None

    # Metadata
    reward: int = 0
    duration: str = ""
    location: str = ""
    conditions: Optional[str] = None
    image: Optional[str] = None

    # Capacity
    slots: int = 1
    accepted: List[int] = field(default_factory=lambda: [])
    # str(user_id) -> acceptance time; string keys keep the document store happy
    accepted_at: Dict[str, datetime] = field(default_factory=lambda: {})

    # Lifecycle
    status: QuestStatus = QuestStatus.OPEN
    completion_key: Optional[str] = None
    completed_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    reviews: QuestReviews = field(default_factory=QuestReviews)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        self.slots = max(1, int(self.slots or 1))
        self.reward = max(0, int(self.reward or 0))
        self.accepted = list(self.accepted)
        self.accepted_at = dict(self.accepted_at)

    # ------- Property Helpers -------

    @property
    def is_completed(self) -> bool:
        return self.status is QuestStatus.COMPLETED

    @property
    def is_full(self) -> bool:
        return len(self.accepted) >= self.slots

    def capacity_remaining(self) -> int:
        return max(0, self.slots - len(self.accepted))

    def accepted_since(self, user_id: int) -> Optional[datetime]:
        return self.accepted_at.get(str(user_id))

    # ------- Lifecycle Helpers -------

    def accept(self, user_id: int) -> str:
        """Add ``user_id`` to the roster and issue a fresh completion key."""
        if self.is_completed:
            raise ConflictError(f"Quest {self.quest_id} is already completed")
        if user_id in self.accepted:
            raise ConflictError(f"User {user_id} already accepted quest {self.quest_id}")
        if user_id == self.creator_id:
            raise ConflictError("Cannot accept your own quest")
        if self.is_full:
            raise ConflictError(f"Quest {self.quest_id} is full")

        self.accepted.append(user_id)
        self.accepted_at[str(user_id)] = _utcnow()
        if self.is_full:
            self.status = QuestStatus.FULL

        self.completion_key = generate_completion_key()
        return self.completion_key

    def leave(self, user_id: int) -> None:
        if self.is_completed:
            raise ConflictError(f"Quest {self.quest_id} is already completed")
        if user_id not in self.accepted:
            raise ConflictError(f"User {user_id} has not accepted quest {self.quest_id}")

        self.accepted.remove(user_id)
        self.accepted_at.pop(str(user_id), None)
        if self.status is QuestStatus.FULL and not self.is_full:
            self.status = QuestStatus.OPEN
        if not self.accepted:
            self.completion_key = None

    def complete(self, user_id: int, key: str) -> None:
        if user_id not in self.accepted:
            raise ForbiddenError(f"User {user_id} has not accepted quest {self.quest_id}")
        if self.is_completed:
            raise ConflictError(f"Quest {self.quest_id} is already completed")
        if not self.completion_key or not secrets.compare_digest(
            str(key or ""), self.completion_key
        ):
            raise ValidationError("Invalid completion key")

        now = _utcnow()
        self.status = QuestStatus.COMPLETED
        self.accepted.remove(user_id)
        self.completed_by = user_id
        self.completed_at = now
        self.completion_key = None

    def ensure_creator(self, user_id: int) -> None:
        if user_id != self.creator_id:
            raise ForbiddenError(f"User {user_id} is not the creator of quest {self.quest_id}")

    # ------- Review Helpers -------

    def review_side(self, user_id: int) -> str:
        """Return ``"creator"`` or ``"completer"`` for a participant of a completed quest."""
        if not self.is_completed:
            raise ConflictError(f"Quest {self.quest_id} is not completed")
        if user_id == self.creator_id:
            return "creator"
        if self.completed_by is not None and user_id == self.completed_by:
            return "completer"
        raise ForbiddenError(f"User {user_id} did not take part in quest {self.quest_id}")

    def counterparty(self, user_id: int) -> Optional[int]:
        if user_id == self.creator_id:
            return self.completed_by
        return self.creator_id

    def mark_reviewed(self, side: str) -> None:
        if side == "creator":
            if self.reviews.creator_reviewed:
                raise ConflictError("Creator already reviewed this quest")
            self.reviews.creator_reviewed = True
        else:
            if self.reviews.completer_reviewed:
                raise ConflictError("Completer already reviewed this quest")
            self.reviews.completer_reviewed = True
