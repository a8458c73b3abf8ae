"""Errors raised by the identity and file registry services."""
from __future__ import annotations

from datetime import datetime


class ServiceError(ValueError):
    """Base class for all service-level failures."""


class NotFoundError(ServiceError):
    """The requested entity does not exist."""


class DuplicateEmailError(ServiceError):
    """Registration with an email that is already taken."""


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password; the two cases are not distinguished."""


class BannedError(ServiceError):
    """Login refused because the account is banned until ``banned_until``."""

    def __init__(self, banned_until: datetime) -> None:
        super().__init__(f"Account banned until {banned_until.isoformat()}")
        self.banned_until = banned_until


class NoSessionError(ServiceError):
    """No active session for the given token."""


class NotFoundOrForbiddenError(ServiceError):
    """File is missing or owned by someone else.

    Collapsed on purpose so a caller cannot tell whether another user's file
    exists.
    """


class ConflictError(ServiceError):
    """The requested short URL is already used by another file."""


class UnsupportedMediaTypeError(ServiceError):
    """Upload content type is neither an image nor a video."""
