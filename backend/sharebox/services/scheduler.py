"""Background scheduler for storage capacity checks."""
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sharebox.core.config import get_settings
from sharebox.db.session import get_session
from sharebox.schemas.file import AdminStats
from sharebox.services import files as file_service
from sharebox.services import users as user_service

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None

STORAGE_CHECK_JOB_ID = "check-storage-capacity"


def get_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler()
    return _scheduler


def start_scheduler() -> None:
    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def schedule_storage_check_job() -> None:
    settings = get_settings()
    scheduler = get_scheduler()
    trigger = IntervalTrigger(seconds=settings.storage_check_interval_seconds)
    scheduler.add_job(_check_storage, trigger=trigger, id=STORAGE_CHECK_JOB_ID, replace_existing=True)
    logger.info("Scheduled storage check every %s seconds", trigger.interval.total_seconds())


def report_storage(stats: AdminStats, warning_ratio: float) -> str:
    """Log the storage state and return its level: ``ok``, ``low`` or ``over``."""
    used_pct = (stats.total_storage / stats.total_capacity * 100) if stats.total_capacity else 100.0
    if stats.remaining_storage < 0:
        logger.error(
            "Storage over capacity by %d bytes (%d files, %.1f%% used)",
            -stats.remaining_storage,
            stats.total_files,
            used_pct,
        )
        return "over"
    if stats.remaining_storage < stats.total_capacity * warning_ratio:
        logger.warning(
            "Storage running low: %d bytes left (%.1f%% used)", stats.remaining_storage, used_pct
        )
        return "low"
    logger.debug("Storage usage %.1f%% across %d files", used_pct, stats.total_files)
    return "ok"


async def _check_storage() -> None:
    settings = get_settings()
    async with get_session() as session:
        stats = await file_service.compute_stats(
            session,
            total_capacity=settings.storage_capacity_bytes,
            total_users=await user_service.count_users(session),
        )
    report_storage(stats, settings.storage_warning_ratio)
