"""Pydantic schemas for file metadata and storage statistics."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sharebox.core.timeutils import as_utc
from sharebox.models.file import FileKind


class FileRead(BaseModel):
    id: str
    user_id: str
    user_email: str
    name: str
    kind: FileKind
    size: int
    url: str
    custom_url: str | None = None
    effective_url: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", mode="after")
    @classmethod
    def _attach_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class CustomUrlUpdate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_\-]+$")


class StorageByType(BaseModel):
    images: int = 0
    videos: int = 0


class AdminStats(BaseModel):
    total_users: int
    total_files: int
    total_storage: int
    storage_by_type: StorageByType
    total_capacity: int
    remaining_storage: int  # negative when over capacity
