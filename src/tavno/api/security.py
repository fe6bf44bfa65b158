# src/tavno/api/security.py
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

import tavno.api.deps as deps
from tavno.domain.errors import NotFoundError
from tavno.domain.models.UserModel import User
from tavno.domain.usecase.users import GetUser
from tavno.infra.settings import JWT_ALG, JWT_EXPIRE_MINUTES, JWT_SECRET

oauth2 = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


class TokenDenylist:
    """Revoked token ids, kept until the token would have expired anyway."""

    def __init__(self) -> None:
        self._revoked: Dict[str, float] = {}

    def _prune(self) -> None:
        now = time.time()
        for jti in [jti for jti, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]

    def revoke(self, jti: str, expires_at: float) -> None:
        self._prune()
        self._revoked[jti] = expires_at

    def is_revoked(self, jti: Optional[str]) -> bool:
        return jti is not None and jti in self._revoked


denylist = TokenDenylist()


def create_access_token(*, sub: int, expires_minutes: int = JWT_EXPIRE_MINUTES) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(sub),
        "jti": secrets.token_hex(16),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: Optional[str]) -> dict:
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
        if not payload.get("sub"):
            raise JWTError("Missing subject")
    except JWTError:
        raise _unauthorized("Invalid token")
    if denylist.is_revoked(payload.get("jti")):
        raise _unauthorized("Token has been revoked")
    return payload


def revoke_token(token: Optional[str]) -> bool:
    """Deny ``token`` until it expires. Missing or unusable tokens are ignored."""
    if not token:
        return False
    try:
        payload = decode_token(token)
    except HTTPException:
        return False
    denylist.revoke(payload["jti"], float(payload.get("exp", time.time())))
    return True


async def _load_user(payload: dict) -> User:
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token")
    try:
        return await GetUser(users_repo=deps.users_repo).execute(user_id)
    except NotFoundError:
        raise _unauthorized("User not found")


async def get_current_user(token: Optional[str] = Depends(oauth2)) -> User:
    return await _load_user(decode_token(token))


async def get_optional_user(token: Optional[str] = Depends(oauth2)) -> Optional[User]:
    """Resolve the caller when a valid token is sent; anonymous otherwise."""
    if not token:
        return None
    try:
        return await _load_user(decode_token(token))
    except HTTPException:
        return None
