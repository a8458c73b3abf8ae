"""Pydantic schemas for user operations."""
from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sharebox.core.timeutils import as_utc, utcnow


class UserCredentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=128)


class UserRead(BaseModel):
    id: str
    email: str
    role: str
    created_at: datetime
    banned_until: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "banned_until", mode="after")
    @classmethod
    def _attach_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class AdminUserRead(UserRead):
    is_banned: bool = False


class BanRequest(BaseModel):
    """Either an absolute expiry or a duration; both empty means unban."""

    banned_until: datetime | None = None
    days: int = Field(default=0, ge=0)
    hours: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_exclusive(self) -> "BanRequest":
        if self.banned_until is not None and self.duration:
            raise ValueError("Give either banned_until or a duration, not both")
        return self

    @property
    def duration(self) -> timedelta:
        return timedelta(days=self.days, hours=self.hours, minutes=self.minutes)

    def resolve_until(self, now: datetime | None = None) -> datetime | None:
        if self.banned_until is not None:
            return self.banned_until
        if self.duration:
            return (now or utcnow()) + self.duration
        return None
