from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# --- Shared Types ---


class ApiModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestStatus(str, Enum):
    OPEN = "open"
    FULL = "full"
    COMPLETED = "completed"


# --- Quests ---


class QuestReviews(BaseModel):
    creator_reviewed: bool = False
    completer_reviewed: bool = False


class Quest(ApiModel):
    id: int
    title: str
    description: str
    category: str
    reward: int = 0
    duration: str = ""
    location: str = ""
    creator: str = ""
    creator_id: int
    creator_phone: Optional[str] = None
    image: Optional[str] = None
    conditions: Optional[str] = None
    slots: int = 1
    accepted: List[int] = Field(default_factory=list)
    status: QuestStatus = QuestStatus.OPEN
    completion_key: Optional[str] = None
    completed_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    reviews: QuestReviews = Field(default_factory=QuestReviews)
    created_at: datetime


class QuestComplete(ApiModel):
    key: Optional[str] = None


class SuccessOut(ApiModel):
    success: bool = True


# --- Auth & users ---


class LoginIn(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupIn(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None


class UserProfile(ApiModel):
    id: int
    name: str
    email: str
    balance: int = 0
    bio: str = ""
    avatar: str = ""
    phone: str = ""


class AuthOut(UserProfile):
    token: str


class Notification(ApiModel):
    id: int
    message: str
    read: bool = False
    timestamp: datetime


# --- Reviews ---


class ReviewIn(ApiModel):
    quest_id: int
    target_user_id: int
    rating: int
    comment: Optional[str] = None


class Review(ApiModel):
    id: int
    quest_id: int
    from_user_id: int
    from_user_name: Optional[str] = None
    to_user_id: int
    rating: int
    comment: str = ""
    created_at: datetime


class PublicProfile(ApiModel):
    id: int
    name: str
    bio: str = ""
    avatar: str = ""
    avg_rating: float = 0.0
    review_count: int = 0
    reviews: List[Review] = Field(default_factory=list)


# --- AI collaborators ---


class AiSearchIn(ApiModel):
    query: Optional[str] = None


class AiSearchOut(ApiModel):
    quests: List[Quest] = Field(default_factory=list)
    suggestion: str = ""
    reasoning: str = ""


class ChatIn(ApiModel):
    message: Optional[str] = None


class ChatOut(ApiModel):
    reply: str
