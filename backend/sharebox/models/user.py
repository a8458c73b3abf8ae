"""Database models for users, their credentials and login sessions."""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from sharebox.core.timeutils import as_utc, utcnow
from sharebox.db.base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Application user. The password lives in ``Credential``, not here."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), default="user")  # user, admin
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    banned_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def is_banned_at(self, now: datetime) -> bool:
        until = as_utc(self.banned_until)
        return until is not None and as_utc(now) < until


class Credential(Base):
    """Password hash for a user, one row per user."""

    __tablename__ = "credentials"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)


class UserSession(Base):
    """Active login session.

    ``user_id`` is deliberately not a foreign key: a session that outlives its
    user must still resolve, so the lookup can report the user as missing.
    """

    __tablename__ = "user_sessions"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
