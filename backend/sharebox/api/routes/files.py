"""Upload, listing and short URL endpoints for a user's own files."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sharebox.core.dependencies import get_current_user, get_db
from sharebox.models.user import User
from sharebox.schemas.file import CustomUrlUpdate, FileRead
from sharebox.services import files as file_service
from sharebox.services.errors import ConflictError, NotFoundOrForbiddenError, UnsupportedMediaTypeError

router = APIRouter(prefix="/files", tags=["files"])

_CHUNK_SIZE = 1024 * 1024


async def _measure(upload: UploadFile) -> int:
    """Count the uploaded bytes without keeping them."""
    if upload.size is not None:
        return upload.size
    total = 0
    while chunk := await upload.read(_CHUNK_SIZE):
        total += len(chunk)
    return total


@router.post("/", response_model=FileRead, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> FileRead:
    try:
        kind = file_service.kind_from_content_type(file.content_type)
    except UnsupportedMediaTypeError as exc:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)) from exc

    size = await _measure(file)
    await file.close()
    try:
        item = await file_service.create(session, current_user, file.filename or "untitled", kind, size)
        await session.commit()
    except (ConflictError, IntegrityError) as exc:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Could not allocate a short URL") from exc
    return FileRead.model_validate(item)


@router.get("/", response_model=list[FileRead])
async def list_my_files(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[FileRead]:
    items = await file_service.list_for_user(session, current_user.id)
    return [FileRead.model_validate(item) for item in items]


@router.get("/resolve", response_model=FileRead)
async def resolve_short_url(
    path: str = Query(..., min_length=1, max_length=128),
    session: AsyncSession = Depends(get_db),
) -> FileRead:
    item = await file_service.resolve(session, path)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileRead.model_validate(item)


@router.put("/{file_id}/url", response_model=FileRead)
async def update_custom_url(
    file_id: str,
    payload: CustomUrlUpdate,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> FileRead:
    try:
        item = await file_service.set_custom_url(session, file_id, payload.slug, current_user.id)
        await session.commit()
    except NotFoundOrForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (ConflictError, IntegrityError) as exc:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This custom URL is already taken") from exc
    return FileRead.model_validate(item)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: str,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        await file_service.delete(session, file_id, current_user.id)
    except NotFoundOrForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
