"""Administrator endpoints: storage stats, user moderation and file moderation."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharebox.core.config import get_settings
from sharebox.core.dependencies import get_db, require_admin
from sharebox.core.timeutils import utcnow
from sharebox.models.user import User
from sharebox.schemas.file import AdminStats, FileRead
from sharebox.schemas.user import AdminUserRead, BanRequest
from sharebox.services import files as file_service
from sharebox.services import users as user_service
from sharebox.services.errors import NotFoundError

router = APIRouter(prefix="/admin", tags=["admin"])


def _to_admin_read(user: User) -> AdminUserRead:
    read = AdminUserRead.model_validate(user)
    read.is_banned = user.is_banned_at(utcnow())
    return read


async def _get_moderatable_user(session: AsyncSession, user_id: str) -> User:
    user = await user_service.get_user(session, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrators cannot be moderated")
    return user


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> AdminStats:
    settings = get_settings()
    return await file_service.compute_stats(
        session,
        total_capacity=settings.storage_capacity_bytes,
        total_users=await user_service.count_users(session),
    )


@router.get("/users", response_model=list[AdminUserRead])
async def list_users(
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[AdminUserRead]:
    users = await user_service.list_users(session)
    return [_to_admin_read(user) for user in users]


@router.put("/users/{user_id}/ban", response_model=AdminUserRead)
async def ban_user(
    user_id: str,
    payload: BanRequest,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> AdminUserRead:
    await _get_moderatable_user(session, user_id)
    try:
        user = await user_service.set_ban(session, user_id, payload.resolve_until())
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    await session.commit()
    return _to_admin_read(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    await _get_moderatable_user(session, user_id)
    try:
        await user_service.delete_user(session, user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/files", response_model=list[FileRead])
async def list_all_files(
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[FileRead]:
    items = await file_service.list_all(session)
    return [FileRead.model_validate(item) for item in items]


@router.delete("/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_any_file(
    file_id: str,
    session: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    await file_service.admin_delete(session, file_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
