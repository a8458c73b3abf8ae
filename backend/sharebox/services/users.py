"""User service functions for registration, login sessions and moderation."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sharebox.core.security import PasswordHasher, new_session_token
from sharebox.core.timeutils import as_utc, utcnow
from sharebox.models.user import Credential, User, UserSession
from sharebox.services import files as file_service
from sharebox.services.errors import (
    BannedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NoSessionError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


async def get_user(session: AsyncSession, user_id: str) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.created_at, User.email))
    return list(result.scalars().all())


async def count_users(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(User.id)))
    return result.scalar_one()


async def _create_user(session: AsyncSession, email: str, password: str, role: str, now: datetime) -> User:
    if await get_user_by_email(session, email):
        raise DuplicateEmailError("User already exists")
    user = User(email=email, role=role, created_at=now)
    session.add(user)
    await session.flush()
    session.add(Credential(user_id=user.id, password_hash=PasswordHasher.hash(password)))
    await session.flush()
    return user


async def _open_session(session: AsyncSession, user: User, now: datetime) -> str:
    token = new_session_token()
    session.add(UserSession(token=token, user_id=user.id, created_at=now))
    await session.flush()
    return token


async def register(
    session: AsyncSession, email: str, password: str, now: datetime | None = None
) -> tuple[User, str]:
    now = now or utcnow()
    user = await _create_user(session, email, password, "user", now)
    token = await _open_session(session, user, now)
    logger.info("Registered user %s", user.id)
    return user, token


async def login(
    session: AsyncSession, email: str, password: str, now: datetime | None = None
) -> tuple[User, str]:
    now = now or utcnow()
    user = await get_user_by_email(session, email)
    if not user:
        logger.warning("Login rejected: unknown email")
        raise InvalidCredentialsError("Invalid credentials")
    if user.is_banned_at(now):
        logger.warning("Login rejected: user %s is banned", user.id)
        raise BannedError(as_utc(user.banned_until))

    credential = await session.get(Credential, user.id)
    if not credential or not PasswordHasher.verify(password, credential.password_hash):
        logger.warning("Login rejected: bad password for user %s", user.id)
        raise InvalidCredentialsError("Invalid credentials")

    token = await _open_session(session, user, now)
    logger.info("User %s logged in", user.id)
    return user, token


async def logout(session: AsyncSession, token: str | None) -> None:
    if not token:
        return
    result = await session.execute(sa_delete(UserSession).where(UserSession.token == token))
    if result.rowcount:
        logger.info("Session closed")


async def current_user(session: AsyncSession, token: str | None) -> User:
    if not token:
        raise NoSessionError("No session")
    user_session = await session.get(UserSession, token)
    if not user_session:
        raise NoSessionError("No session")
    user = await get_user(session, user_session.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def set_ban(session: AsyncSession, user_id: str, until: datetime | None) -> User:
    """Ban ``user_id`` until ``until``, or lift the ban when ``until`` is None.

    No role check happens here; callers restrict this to administrators.
    """
    user = await get_user(session, user_id)
    if not user:
        raise NotFoundError("User not found")
    user.banned_until = as_utc(until)
    await session.flush()
    if until is None:
        logger.info("Ban cleared for user %s", user_id)
    else:
        logger.info("User %s banned until %s", user_id, user.banned_until.isoformat())
    return user


async def delete_user(session: AsyncSession, user_id: str) -> None:
    user = await get_user(session, user_id)
    if not user:
        raise NotFoundError("User not found")
    removed_files = await file_service.cascade_delete_for_user(session, user_id)
    await session.execute(sa_delete(Credential).where(Credential.user_id == user_id))
    await session.delete(user)
    await session.flush()
    logger.info("Deleted user %s and %d file(s)", user_id, removed_files)


async def ensure_admin(session: AsyncSession, email: str, password: str) -> User | None:
    """Create the initial administrator unless that email is already registered."""
    if await get_user_by_email(session, email):
        return None
    user = await _create_user(session, email, password, "admin", utcnow())
    logger.info("Created initial admin account %s", user.id)
    return user
