"""Translate domain errors into HTTP responses at the router boundary."""

from __future__ import annotations

from typing import Dict, Type

from fastapi import HTTPException, status

from tavno.domain.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    UpstreamError,
    ValidationError,
)

STATUS_BY_ERROR: Dict[Type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    UpstreamError: status.HTTP_502_BAD_GATEWAY,
}


def http_error(err: ValueError) -> HTTPException:
    """Map a domain error to an ``HTTPException``; plain ``ValueError`` is a 400."""
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(err, error_type):
            return HTTPException(status_code=code, detail=str(err))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))
