import logging

import pytest

from sharebox.models.file import FileKind
from sharebox.schemas.file import AdminStats, StorageByType
from sharebox.services import files as file_service
from sharebox.services import scheduler
from sharebox.services import users as user_service


def _stats(used, capacity=1000):
    return AdminStats(
        total_users=1,
        total_files=1,
        total_storage=used,
        storage_by_type=StorageByType(images=used, videos=0),
        total_capacity=capacity,
        remaining_storage=capacity - used,
    )


@pytest.mark.parametrize(
    "used, level",
    [
        (0, "ok"),
        (899, "ok"),
        (901, "low"),
        (1000, "low"),
        (1200, "over"),
    ],
)
def test_report_storage_levels(used, level):
    assert scheduler.report_storage(_stats(used), warning_ratio=0.1) == level


def test_report_storage_logs_over_capacity(caplog):
    with caplog.at_level(logging.ERROR, logger="sharebox.services.scheduler"):
        scheduler.report_storage(_stats(1500), warning_ratio=0.1)

    assert "over capacity by 500 bytes" in caplog.text


async def test_check_storage_reads_current_usage(session_factory, monkeypatch, caplog):
    async with session_factory() as session:
        user, _ = await user_service.register(session, "bob@example.com", "secret")
        await file_service.create(session, user, "big.mp4", FileKind.video, 2 * 1024**3)
        await session.commit()
    monkeypatch.setattr(scheduler, "get_session", session_factory)

    with caplog.at_level(logging.ERROR, logger="sharebox.services.scheduler"):
        await scheduler._check_storage()

    assert "over capacity" in caplog.text
