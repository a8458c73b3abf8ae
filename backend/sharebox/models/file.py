"""Database model for uploaded file metadata and short URLs."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sharebox.core.timeutils import utcnow
from sharebox.db.base import Base


class FileKind(str, enum.Enum):
    image = "image"
    video = "video"

    @property
    def url_prefix(self) -> str:
        return "foto" if self is FileKind.image else "video"


class FileItem(Base):
    """Metadata of one upload. Only the metadata is stored, never the bytes."""

    __tablename__ = "files"

    # Integer primary key doubles as insertion order for most-recent-first listings
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, index=True, default=lambda: uuid.uuid4().hex)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(1024), nullable=False)
    kind: Mapped[FileKind] = mapped_column(Enum(FileKind, native_enum=False, length=16), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    url: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    custom_url: Mapped[str | None] = mapped_column(String(128), unique=True, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def effective_url(self) -> str:
        return self.custom_url or self.url
