"""Mini README: Calendar triggers for the backup buckets.

Structure:
    * BackupSchedule - when a bucket is due (hour, optional weekday/day of month).
    * DEFAULT_SCHEDULES - daily 03:00, weekly Monday 04:00, monthly 1st 05:00.
    * BackupScheduler - runs due buckets using an injected clock.

The scheduler has no timer of its own. ``run_pending`` asks each schedule for
its most recent trigger at or before "now" and runs the bucket if that trigger
is newer than the bucket's last run. ``run_forever`` is the asyncio loop the
web application starts; tests call ``run_pending`` with explicit times.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from ..logging_utils import get_logger
from .archiver import BackupArchiver, BackupRecord, RetentionBucket

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class BackupSchedule:
    """Trigger description; ``weekday`` uses Monday=0, ``day`` is the day of month."""

    bucket: RetentionBucket
    hour: int
    minute: int = 0
    weekday: Optional[int] = None
    day: Optional[int] = None

    def __post_init__(self) -> None:
        if self.day is not None and not 1 <= self.day <= 28:
            raise ValueError("Monthly backups must trigger on days 1-28")
        if self.weekday is not None and not 0 <= self.weekday <= 6:
            raise ValueError("Weekday must be between 0 (Monday) and 6 (Sunday)")

    def last_trigger(self, now: datetime) -> datetime:
        """Most recent scheduled instant at or before ``now``."""

        candidate = now.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if self.day is not None:
            candidate = candidate.replace(day=self.day)
            if candidate > now:
                previous_month = candidate.replace(day=1) - timedelta(days=1)
                candidate = candidate.replace(year=previous_month.year, month=previous_month.month)
            return candidate
        if self.weekday is not None:
            candidate -= timedelta(days=(candidate.weekday() - self.weekday) % 7)
            if candidate > now:
                candidate -= timedelta(days=7)
            return candidate
        if candidate > now:
            candidate -= timedelta(days=1)
        return candidate


DEFAULT_SCHEDULES = (
    BackupSchedule(RetentionBucket.DAILY, hour=3),
    BackupSchedule(RetentionBucket.WEEKLY, hour=4, weekday=0),
    BackupSchedule(RetentionBucket.MONTHLY, hour=5, day=1),
)


class BackupScheduler:
    """Run archive jobs for buckets whose trigger has passed since their last run."""

    def __init__(
        self,
        archiver: BackupArchiver,
        *,
        schedules: Iterable[BackupSchedule] = DEFAULT_SCHEDULES,
        clock: Callable[[], datetime] = datetime.now,
        started_at: Optional[datetime] = None,
    ) -> None:
        self.archiver = archiver
        self.schedules = list(schedules)
        self.clock = clock
        start = started_at or clock()
        # Triggers that fired before start-up are not caught up.
        self.last_run: Dict[RetentionBucket, datetime] = {
            schedule.bucket: schedule.last_trigger(start) for schedule in self.schedules
        }

    def due(self, now: Optional[datetime] = None) -> List[BackupSchedule]:
        now = now or self.clock()
        return [
            schedule
            for schedule in self.schedules
            if schedule.last_trigger(now) > self.last_run[schedule.bucket]
        ]

    def run_pending(self, now: Optional[datetime] = None) -> List[BackupRecord]:
        """Create one archive per due bucket and return what was written."""

        now = now or self.clock()
        records: List[BackupRecord] = []
        for schedule in self.due(now):
            LOGGER.info("Running %s backup", schedule.bucket.value.upper())
            records.append(self.archiver.create(schedule.bucket, now))
            self.last_run[schedule.bucket] = schedule.last_trigger(now)
        return records

    async def run_forever(self, poll_seconds: float = 60.0) -> None:
        """Poll for due buckets until cancelled."""

        LOGGER.info("Backup scheduler started (poll every %ss)", poll_seconds)
        while True:
            try:
                await asyncio.to_thread(self.run_pending)
            except Exception:
                LOGGER.exception("Backup run failed; retrying at the next poll")
            await asyncio.sleep(poll_seconds)
