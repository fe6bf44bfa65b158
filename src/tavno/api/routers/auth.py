# src/tavno/api/routers/auth.py
from typing import Optional

from fastapi import APIRouter, Depends

import tavno.api.deps as deps
from tavno.api.errors import http_error
from tavno.api.mappers import auth_to_api, user_to_api
from tavno.api.schemas import AuthOut, LoginIn, SignupIn, SuccessOut, UserProfile
from tavno.api.security import create_access_token, get_current_user, oauth2, revoke_token
from tavno.domain.errors import DomainError
from tavno.domain.models.UserModel import User
from tavno.domain.usecase import users as user_usecases

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthOut)
async def login(data: LoginIn) -> AuthOut:
    try:
        usecase = user_usecases.AuthenticateUser(
            users_repo=deps.users_repo, hasher=deps.hasher
        )
        user = await usecase.execute(data.email, data.password)
    except DomainError as err:
        raise http_error(err) from err
    return auth_to_api(user, create_access_token(sub=user.user_id))


@router.post("/signup", response_model=AuthOut, status_code=201)
async def signup(data: SignupIn) -> AuthOut:
    try:
        usecase = user_usecases.RegisterUser(
            users_repo=deps.users_repo, locks=deps.store.locks, hasher=deps.hasher
        )
        user = await usecase.execute(
            email=data.email,
            password=data.password,
            confirm_password=data.confirm_password,
            username=data.username,
            phone=data.phone,
        )
    except DomainError as err:
        raise http_error(err) from err
    return auth_to_api(user, create_access_token(sub=user.user_id))


@router.post("/logout", response_model=SuccessOut)
async def logout(token: Optional[str] = Depends(oauth2)) -> SuccessOut:
    # Logging out is idempotent; a missing or expired token still succeeds.
    revoke_token(token)
    return SuccessOut(success=True)


@router.get("/me", response_model=UserProfile)
async def me(user: User = Depends(get_current_user)) -> UserProfile:
    return user_to_api(user)
