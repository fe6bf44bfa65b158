from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tavno.api.schemas import AuthOut
from tavno.api.schemas import Notification as APINotification
from tavno.api.schemas import PublicProfile as APIPublicProfile
from tavno.api.schemas import Quest as APIQuest
from tavno.api.schemas import QuestReviews as APIQuestReviews
from tavno.api.schemas import QuestStatus as APIQuestStatus
from tavno.api.schemas import Review as APIReview
from tavno.api.schemas import UserProfile as APIUserProfile
from tavno.domain.models.QuestModel import Quest as DQuest
from tavno.domain.models.ReviewModel import Review as DReview
from tavno.domain.models.UserModel import Notification as DNotification
from tavno.domain.models.UserModel import User as DUser
from tavno.domain.usecase.users.get_user import PublicProfile as DPublicProfile

# ---------- helpers ----------


def _utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return a timezone-aware UTC datetime or None."""
    if dt is None:
        return None
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# ---------- quests ----------


def quest_to_api(quest: DQuest, viewer_id: Optional[int] = None) -> APIQuest:
    """The completion key is only shown to the quest's creator."""
    show_key = viewer_id is not None and viewer_id == quest.creator_id
    return APIQuest(
        id=quest.quest_id,
        title=quest.title,
        description=quest.description,
        category=quest.category,
        reward=quest.reward,
        duration=quest.duration,
        location=quest.location,
        creator=quest.creator,
        creator_id=quest.creator_id,
        creator_phone=quest.creator_phone,
        image=quest.image,
        conditions=quest.conditions,
        slots=quest.slots,
        accepted=list(quest.accepted),
        status=APIQuestStatus(quest.status.value),
        completion_key=quest.completion_key if show_key else None,
        completed_by=quest.completed_by,
        completed_at=_utc(quest.completed_at),
        reviews=APIQuestReviews(
            creator_reviewed=quest.reviews.creator_reviewed,
            completer_reviewed=quest.reviews.completer_reviewed,
        ),
        created_at=_utc(quest.created_at),
    )


def quest_event_payload(quest: DQuest) -> Dict[str, Any]:
    return quest_to_api(quest).model_dump(mode="json", by_alias=True)


# ---------- users ----------


def user_to_api(user: DUser) -> APIUserProfile:
    return APIUserProfile(
        id=user.user_id,
        name=user.name,
        email=user.email,
        balance=user.balance,
        bio=user.bio or "",
        avatar=user.avatar or "",
        phone=user.phone or "",
    )


def auth_to_api(user: DUser, token: str) -> AuthOut:
    return AuthOut(token=token, **user_to_api(user).model_dump())


def notification_to_api(notification: DNotification) -> APINotification:
    return APINotification(
        id=notification.notification_id,
        message=notification.message,
        read=notification.read,
        timestamp=_utc(notification.timestamp),
    )


# ---------- reviews ----------


def review_to_api(review: DReview, from_user_name: Optional[str] = None) -> APIReview:
    return APIReview(
        id=review.review_id,
        quest_id=review.quest_id,
        from_user_id=review.from_user_id,
        from_user_name=from_user_name,
        to_user_id=review.to_user_id,
        rating=review.rating,
        comment=review.comment,
        created_at=_utc(review.created_at),
    )


def public_profile_to_api(profile: DPublicProfile) -> APIPublicProfile:
    user = profile.user
    return APIPublicProfile(
        id=user.user_id,
        name=user.name,
        bio=user.bio or "",
        avatar=user.avatar or "",
        avg_rating=profile.avg_rating,
        review_count=profile.review_count,
        reviews=[review_to_api(review, name) for review, name in profile.reviews],
    )
