"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharebox.core.config import get_settings
from sharebox.core.security import SessionSigner
from sharebox.core.timeutils import as_utc, utcnow
from sharebox.db.session import get_session
from sharebox.models.user import User
from sharebox.schemas.auth import BannedDetail
from sharebox.services import users as user_service
from sharebox.services.errors import NoSessionError, NotFoundError

SESSION_COOKIE_NAME = "sharebox_session"


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


def get_session_token(request: Request) -> str | None:
    """Return the session id carried by the signed cookie, or None."""
    settings = get_settings()
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if not cookie:
        return None
    try:
        payload = SessionSigner().loads(cookie, max_age=settings.session_max_age_minutes * 60)
    except ValueError:
        return None
    return payload.get("sid")


def banned_exception(banned_until: datetime) -> HTTPException:
    detail = BannedDetail(banned_until=as_utc(banned_until))
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail.model_dump(mode="json"))


async def get_current_user(
    token: str | None = Depends(get_session_token),
    session: AsyncSession = Depends(get_db),
) -> User:
    try:
        user = await user_service.current_user(session, token)
    except NoSessionError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated") from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found") from exc

    if user.is_banned_at(utcnow()):
        raise banned_exception(user.banned_until)
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
