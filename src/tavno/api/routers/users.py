"""Endpoints for the caller's own account and for public profiles."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

import tavno.api.deps as deps
from tavno.api.errors import http_error
from tavno.api.mappers import notification_to_api, public_profile_to_api, user_to_api
from tavno.api.schemas import Notification, PublicProfile, UserProfile
from tavno.api.security import get_current_user
from tavno.domain.errors import DomainError
from tavno.domain.models.UserModel import User
from tavno.domain.usecase import users as user_usecases

router = APIRouter(prefix="/user", tags=["Users"])
public_router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/notifications", response_model=List[Notification])
async def list_notifications(user: User = Depends(get_current_user)) -> List[Notification]:
    """Return the caller's notifications, oldest first."""
    usecase = user_usecases.ListNotifications(users_repo=deps.users_repo)
    try:
        notifications = await usecase.execute(user.user_id)
    except DomainError as err:
        raise http_error(err) from err
    return [notification_to_api(n) for n in notifications]


@router.post("/notifications/{notification_id}/read", response_model=Notification)
async def mark_notification_read(
    notification_id: str, user: User = Depends(get_current_user)
) -> Notification:
    try:
        usecase = user_usecases.MarkNotificationRead(
            users_repo=deps.users_repo, locks=deps.store.locks
        )
        notification = await usecase.execute(user.user_id, notification_id)
    except DomainError as err:
        raise http_error(err) from err
    return notification_to_api(notification)


@router.post("/profile", response_model=UserProfile)
async def update_profile(
    name: Optional[str] = Form(default=None),
    bio: Optional[str] = Form(default=None),
    phone: Optional[str] = Form(default=None),
    avatar: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
) -> UserProfile:
    """Update the caller's name, bio, phone or avatar (multipart form)."""
    upload = None
    if avatar is not None and avatar.filename:
        upload = user_usecases.AvatarUpload(
            filename=avatar.filename, content=await avatar.read()
        )
    try:
        usecase = user_usecases.UpdateUserProfile(
            users_repo=deps.users_repo, locks=deps.store.locks, assets=deps.assets
        )
        updated = await usecase.execute(
            user.user_id, name=name, bio=bio, phone=phone, avatar=upload
        )
    except DomainError as err:
        raise http_error(err) from err
    return user_to_api(updated)


@public_router.get("/{user_id}", response_model=PublicProfile)
async def get_public_profile(user_id: str) -> PublicProfile:
    """Public profile with the reviews the user has received."""
    try:
        usecase = user_usecases.GetPublicProfile(
            users_repo=deps.users_repo, reviews_repo=deps.reviews_repo
        )
        profile = await usecase.execute(user_id)
    except DomainError as err:
        raise http_error(err) from err
    return public_profile_to_api(profile)
