"""Error taxonomy raised by use cases and mapped to HTTP statuses by the API."""

from __future__ import annotations


class DomainError(ValueError):
    """Base class for every failure a lifecycle operation can report."""


class NotFoundError(DomainError):
    pass


class ForbiddenError(DomainError):
    pass


class ConflictError(DomainError):
    pass


class ValidationError(DomainError):
    pass


class UnauthenticatedError(DomainError):
    pass


class UpstreamError(DomainError):
    """An external collaborator (AI, asset store) returned something unusable."""


__all__ = [
    "DomainError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "ValidationError",
    "UnauthenticatedError",
    "UpstreamError",
]
