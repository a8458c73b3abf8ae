"""File registry: upload metadata, short URL assignment and resolution."""
from __future__ import annotations

import logging
import secrets
import string

from sqlalchemy import delete as sa_delete
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from sharebox.core.config import get_settings
from sharebox.models.file import FileItem, FileKind
from sharebox.models.user import User
from sharebox.schemas.file import AdminStats, StorageByType
from sharebox.services.errors import ConflictError, NotFoundOrForbiddenError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

SLUG_ALPHABET = string.ascii_lowercase + string.digits


def kind_from_content_type(content_type: str | None) -> FileKind:
    major = (content_type or "").split("/", 1)[0].strip().lower()
    if major == "image":
        return FileKind.image
    if major == "video":
        return FileKind.video
    raise UnsupportedMediaTypeError(f"Unsupported content type: {content_type!r}")


def build_path(kind: FileKind, slug: str) -> str:
    return f"/{kind.url_prefix}/{slug}"


def _generate_slug(length: int) -> str:
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


async def _path_taken(session: AsyncSession, path: str, exclude_file_id: str | None = None) -> bool:
    query = select(FileItem.id).where(or_(FileItem.url == path, FileItem.custom_url == path))
    if exclude_file_id is not None:
        query = query.where(FileItem.id != exclude_file_id)
    result = await session.execute(query.limit(1))
    return result.first() is not None


async def create(session: AsyncSession, owner: User, name: str, kind: FileKind, size: int) -> FileItem:
    settings = get_settings()
    for _ in range(settings.slug_max_attempts):
        url = build_path(kind, _generate_slug(settings.slug_length))
        if not await _path_taken(session, url):
            break
        logger.debug("Slug collision on %s, drawing again", url)
    else:
        raise ConflictError("Could not allocate a free short URL")

    item = FileItem(
        user_id=owner.id,
        user_email=owner.email,
        name=name,
        kind=kind,
        size=size,
        url=url,
    )
    session.add(item)
    await session.flush()
    logger.info("User %s uploaded %s (%s, %d bytes) at %s", owner.id, item.id, kind.value, size, url)
    return item


async def list_for_user(session: AsyncSession, user_id: str) -> list[FileItem]:
    result = await session.execute(
        select(FileItem).where(FileItem.user_id == user_id).order_by(FileItem.seq.desc())
    )
    return list(result.scalars().all())


async def list_all(session: AsyncSession) -> list[FileItem]:
    result = await session.execute(select(FileItem).order_by(FileItem.seq.desc()))
    return list(result.scalars().all())


async def get_file(session: AsyncSession, file_id: str) -> FileItem | None:
    result = await session.execute(select(FileItem).where(FileItem.id == file_id))
    return result.scalar_one_or_none()


async def resolve(session: AsyncSession, path: str) -> FileItem | None:
    """Return the file whose effective URL equals ``path``, if any.

    A custom URL replaces the system URL, so a renamed file no longer answers
    on its original path.
    """
    result = await session.execute(
        select(FileItem)
        .where(
            or_(
                FileItem.custom_url == path,
                and_(FileItem.custom_url.is_(None), FileItem.url == path),
            )
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _get_owned(session: AsyncSession, file_id: str, user_id: str) -> FileItem:
    result = await session.execute(
        select(FileItem).where(FileItem.id == file_id, FileItem.user_id == user_id)
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundOrForbiddenError("File not found or permission denied")
    return item


async def set_custom_url(session: AsyncSession, file_id: str, new_slug: str, requesting_user_id: str) -> FileItem:
    item = await _get_owned(session, file_id, requesting_user_id)
    candidate = build_path(item.kind, new_slug)
    # A file may take back its own current path; only other files conflict
    if await _path_taken(session, candidate, exclude_file_id=item.id):
        raise ConflictError("This custom URL is already taken")
    item.custom_url = candidate
    await session.flush()
    logger.info("File %s now reachable at %s", item.id, candidate)
    return item


async def delete(session: AsyncSession, file_id: str, requesting_user_id: str) -> None:
    item = await _get_owned(session, file_id, requesting_user_id)
    await session.delete(item)
    await session.flush()
    logger.info("User %s deleted file %s", requesting_user_id, file_id)


async def admin_delete(session: AsyncSession, file_id: str) -> bool:
    result = await session.execute(sa_delete(FileItem).where(FileItem.id == file_id))
    removed = result.rowcount > 0
    if removed:
        logger.info("Admin removed file %s", file_id)
    return removed


async def cascade_delete_for_user(session: AsyncSession, user_id: str) -> int:
    result = await session.execute(sa_delete(FileItem).where(FileItem.user_id == user_id))
    return result.rowcount


async def compute_stats(session: AsyncSession, total_capacity: int, total_users: int) -> AdminStats:
    result = await session.execute(
        select(FileItem.kind, func.count(FileItem.seq), func.coalesce(func.sum(FileItem.size), 0))
        .group_by(FileItem.kind)
    )
    by_kind = {FileKind.image: 0, FileKind.video: 0}
    total_files = 0
    for kind, count, size in result.all():
        by_kind[FileKind(kind)] = int(size)
        total_files += count

    total_storage = by_kind[FileKind.image] + by_kind[FileKind.video]
    return AdminStats(
        total_users=total_users,
        total_files=total_files,
        total_storage=total_storage,
        storage_by_type=StorageByType(images=by_kind[FileKind.image], videos=by_kind[FileKind.video]),
        total_capacity=total_capacity,
        remaining_storage=total_capacity - total_storage,
    )
