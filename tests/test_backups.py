"""Mini README: Tests for backup archives, rotation and scheduling.

Structure:
    * archiver tests - ZIP contents and evict-then-write rotation.
    * schedule tests - daily/weekly/monthly trigger calculation.
    * scheduler tests - buckets run once per trigger, no catch-up at start-up.
    * failure tests - a failed archive keeps the bucket intact and the loop keeps polling.
"""

from __future__ import annotations

import asyncio
import zipfile
from datetime import datetime
from pathlib import Path

import pytest

from langar_ledger.backups import (
    DEFAULT_SCHEDULES,
    BackupArchiver,
    BackupSchedule,
    BackupScheduler,
    RetentionBucket,
)


@pytest.fixture()
def data_directory(tmp_path):
    data = tmp_path / "data"
    (data / "uploads").mkdir(parents=True)
    (data / "members.json").write_text("[]", encoding="utf-8")
    (data / "donations.json").write_text("{}", encoding="utf-8")
    (data / "uploads" / "7.jpg").write_bytes(b"jpeg")
    return data


def test_archive_contains_documents_but_not_uploads(tmp_path, data_directory) -> None:
    archiver = BackupArchiver(data_directory, tmp_path / "backup", exclude=[data_directory / "uploads"])

    record = archiver.create(RetentionBucket.DAILY, now=datetime(2024, 3, 4, 3, 0))

    assert record.path.parent == tmp_path / "backup" / "day-backup"
    assert record.path.name == "backup-daily-2024-03-04T03-00-00-000000.zip"
    with zipfile.ZipFile(record.path) as archive:
        assert sorted(archive.namelist()) == ["donations.json", "members.json"]
    assert record.file_count == 2


def test_rotation_keeps_at_most_capacity(tmp_path, data_directory) -> None:
    """The oldest archive, by the timestamp in its name, is evicted first."""

    archiver = BackupArchiver(data_directory, tmp_path / "backup", capacity=2)

    archiver.create(RetentionBucket.WEEKLY, now=datetime(2024, 3, 4, 4, 0))
    archiver.create(RetentionBucket.WEEKLY, now=datetime(2024, 3, 11, 4, 0))
    record = archiver.create(RetentionBucket.WEEKLY, now=datetime(2024, 3, 18, 4, 0))

    names = [path.name for path in archiver.list_archives(RetentionBucket.WEEKLY)]
    assert names == [
        "backup-weekly-2024-03-11T04-00-00-000000.zip",
        "backup-weekly-2024-03-18T04-00-00-000000.zip",
    ]
    assert [path.name for path in record.evicted] == ["backup-weekly-2024-03-04T04-00-00-000000.zip"]
    assert archiver.list_archives(RetentionBucket.DAILY) == []


def test_archiver_rejects_zero_capacity(tmp_path) -> None:
    with pytest.raises(ValueError):
        BackupArchiver(tmp_path, tmp_path / "backup", capacity=0)


def test_daily_trigger() -> None:
    schedule = BackupSchedule(RetentionBucket.DAILY, hour=3)

    assert schedule.last_trigger(datetime(2024, 3, 4, 3, 0)) == datetime(2024, 3, 4, 3, 0)
    assert schedule.last_trigger(datetime(2024, 3, 4, 2, 59)) == datetime(2024, 3, 3, 3, 0)


def test_weekly_trigger_lands_on_monday() -> None:
    schedule = BackupSchedule(RetentionBucket.WEEKLY, hour=4, weekday=0)

    # 2024-03-04 is a Monday.
    assert schedule.last_trigger(datetime(2024, 3, 7, 12, 0)) == datetime(2024, 3, 4, 4, 0)
    assert schedule.last_trigger(datetime(2024, 3, 4, 3, 0)) == datetime(2024, 2, 26, 4, 0)


def test_monthly_trigger_rolls_back_over_new_year() -> None:
    schedule = BackupSchedule(RetentionBucket.MONTHLY, hour=5, day=1)

    assert schedule.last_trigger(datetime(2024, 3, 15, 0, 0)) == datetime(2024, 3, 1, 5, 0)
    assert schedule.last_trigger(datetime(2024, 1, 1, 4, 0)) == datetime(2023, 12, 1, 5, 0)


def test_schedule_validation() -> None:
    with pytest.raises(ValueError):
        BackupSchedule(RetentionBucket.MONTHLY, hour=5, day=31)
    with pytest.raises(ValueError):
        BackupSchedule(RetentionBucket.WEEKLY, hour=4, weekday=7)


def test_scheduler_runs_each_bucket_once_per_trigger(tmp_path, data_directory) -> None:
    archiver = BackupArchiver(data_directory, tmp_path / "backup")
    scheduler = BackupScheduler(archiver, schedules=DEFAULT_SCHEDULES, started_at=datetime(2024, 3, 4, 2, 0))

    assert scheduler.run_pending(datetime(2024, 3, 4, 2, 30)) == []

    daily = scheduler.run_pending(datetime(2024, 3, 4, 3, 30))
    assert [record.bucket for record in daily] == [RetentionBucket.DAILY]
    assert scheduler.run_pending(datetime(2024, 3, 4, 3, 45)) == []

    weekly = scheduler.run_pending(datetime(2024, 3, 4, 4, 30))
    assert [record.bucket for record in weekly] == [RetentionBucket.WEEKLY]

    # 2024-04-01 is a Monday and the first of the month.
    all_three = scheduler.run_pending(datetime(2024, 4, 1, 6, 0))
    assert {record.bucket for record in all_three} == set(RetentionBucket)


def test_scheduler_does_not_catch_up_missed_triggers(tmp_path, data_directory) -> None:
    archiver = BackupArchiver(data_directory, tmp_path / "backup")
    now = datetime(2024, 3, 4, 12, 0)
    scheduler = BackupScheduler(archiver, clock=lambda: now)

    assert scheduler.due() == []
    assert scheduler.run_pending() == []


def test_failed_archive_keeps_existing_backups(tmp_path, data_directory, monkeypatch) -> None:
    """A write that dies half-way neither evicts nor leaves a partial archive."""

    archiver = BackupArchiver(data_directory, tmp_path / "backup", capacity=1)
    first = archiver.create(RetentionBucket.DAILY, now=datetime(2024, 3, 4, 3, 0))

    def _disk_full(root, target, *, exclude=()):
        Path(target).write_bytes(b"half a zip")
        raise OSError("No space left on device")

    monkeypatch.setattr("langar_ledger.backups.archiver.zip_directory", _disk_full)
    with pytest.raises(OSError):
        archiver.create(RetentionBucket.DAILY, now=datetime(2024, 3, 5, 3, 0))

    assert archiver.list_archives(RetentionBucket.DAILY) == [first.path]
    assert [path.name for path in first.path.parent.iterdir()] == [first.path.name]


def test_run_forever_survives_a_failed_run(tmp_path, data_directory) -> None:
    archiver = BackupArchiver(data_directory, tmp_path / "backup")
    scheduler = BackupScheduler(archiver, started_at=datetime(2024, 3, 4, 2, 0))
    calls = []

    def _broken(now=None):
        calls.append(now)
        raise ValueError("unexpected archive state")

    scheduler.run_pending = _broken

    async def _run_briefly() -> None:
        await asyncio.wait_for(scheduler.run_forever(poll_seconds=0.01), timeout=0.2)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(_run_briefly())
    assert len(calls) >= 2
