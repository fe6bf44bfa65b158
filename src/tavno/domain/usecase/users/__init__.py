from tavno.domain.usecase.users.authenticate_user import AuthenticateUser
from tavno.domain.usecase.users.get_user import GetPublicProfile, GetUser, PublicProfile
from tavno.domain.usecase.users.notifications import (
    ListNotifications,
    MarkNotificationRead,
    NotifyUser,
)
from tavno.domain.usecase.users.register_user import RegisterUser
from tavno.domain.usecase.users.update_user import AvatarUpload, UpdateUserProfile

__all__ = [
    "AuthenticateUser",
    "GetUser",
    "GetPublicProfile",
    "PublicProfile",
    "ListNotifications",
    "MarkNotificationRead",
    "NotifyUser",
    "RegisterUser",
    "AvatarUpload",
    "UpdateUserProfile",
]
