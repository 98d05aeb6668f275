# app/domain/errors.py
from __future__ import annotations


class ScoringError(Exception):
    """Base exception for tenant-score errors."""


class NotFoundError(ScoringError):
    """Raised when a tenant score (or a listing) does not exist."""


class ValidationError(ScoringError):
    """Raised on malformed or empty inputs."""


class ConflictError(ScoringError):
    """
    Raised by the storage layer when a write hits a uniqueness constraint,
    e.g. two concurrent default-score creations for one tenant.
    """


class PermissionDeniedError(ScoringError):
    """Raised when the caller may not read another tenant's score."""
