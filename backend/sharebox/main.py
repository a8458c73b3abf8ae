"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from sharebox.api import api_router
from sharebox.core.config import get_settings
from sharebox.db.base import Base
from sharebox.db.session import engine, get_session
from sharebox.services import users as user_service
from sharebox.services.scheduler import get_scheduler, schedule_storage_check_job, start_scheduler

settings = get_settings()
logger = logging.getLogger(__name__)


async def _seed_admin() -> None:
    if not (settings.admin_email and settings.admin_password):
        return
    async with get_session() as session:
        created = await user_service.ensure_admin(session, settings.admin_email, settings.admin_password)
        await session.commit()
    if created is None:
        logger.debug("Admin account %s already present", settings.admin_email)


@asynccontextmanager
async def lifespan(_: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await _seed_admin()
    start_scheduler()
    schedule_storage_check_job()

    try:
        yield
    finally:
        scheduler = get_scheduler()
        if scheduler.running:
            scheduler.shutdown(wait=False)


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)

# Serve the built frontend if present; API routes are registered first and win
static_dir = Path(__file__).parent.parent.parent / "static"
if static_dir.exists() and static_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
