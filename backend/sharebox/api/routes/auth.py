"""Authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sharebox.core.config import get_settings
from sharebox.core.dependencies import (
    SESSION_COOKIE_NAME,
    banned_exception,
    get_current_user,
    get_db,
    get_session_token,
)
from sharebox.core.security import SessionSigner
from sharebox.models.user import User
from sharebox.schemas.user import UserCredentials, UserRead
from sharebox.services import users as user_service
from sharebox.services.errors import BannedError, DuplicateEmailError, InvalidCredentialsError

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=SessionSigner().dumps({"sid": token}),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_max_age_minutes * 60,
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCredentials,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> UserRead:
    try:
        user, token = await user_service.register(session, payload.email, payload.password)
        await session.commit()
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except IntegrityError as exc:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists") from exc

    _set_session_cookie(response, token)
    return UserRead.model_validate(user)


@router.post("/login", response_model=UserRead)
async def login(
    payload: UserCredentials,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> UserRead:
    try:
        user, token = await user_service.login(session, payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from exc
    except BannedError as exc:
        raise banned_exception(exc.banned_until) from exc

    await session.commit()
    _set_session_cookie(response, token)
    return UserRead.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    session: AsyncSession = Depends(get_db),
) -> None:
    await user_service.logout(session, token)
    await session.commit()
    response.delete_cookie(SESSION_COOKIE_NAME)


@router.get("/me", response_model=UserRead)
async def get_current_user_info(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
