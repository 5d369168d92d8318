"""Mini README: ZIP archives of the working data and rotation of old backups.

Structure:
    * zip_directory - write a directory tree into a ZIP, skipping excluded paths.
    * RetentionBucket - one of the daily/weekly/monthly backup folders.
    * BackupArchiver - evict-then-write rotation of timestamped archives.

Rotation order is evict-then-write: before a new archive is published, the
oldest archives are deleted until the bucket holds fewer than ``capacity``
files, so a bucket never retains more than ``capacity`` archives. Age is taken
from the timestamp embedded in the file name, not from filesystem metadata.
"""

from __future__ import annotations

import os
import zipfile
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S-%f"


class RetentionBucket(str, Enum):
    """Backup buckets and the folder each one writes to."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def folder_name(self) -> str:
        return {"daily": "day-backup", "weekly": "week-backup", "monthly": "month-backup"}[self.value]


def _is_excluded(path: Path, excluded: List[Path]) -> bool:
    return any(path == item or item in path.parents for item in excluded)


def zip_directory(
    root: Path,
    target: Union[Path, BinaryIO],
    *,
    exclude: Iterable[Path] = (),
) -> int:
    """Write every file under ``root`` into ``target``; return the file count."""

    root = Path(root).resolve()
    excluded = [Path(item).resolve() for item in exclude]
    written = 0
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(root.rglob("*")):
            resolved = path.resolve()
            if not path.is_file() or _is_excluded(resolved, excluded):
                continue
            if isinstance(target, Path) and resolved == target.resolve():
                continue
            archive.write(path, arcname=str(path.relative_to(root)))
            written += 1
    return written


@dataclass(slots=True)
class BackupRecord:
    bucket: RetentionBucket
    path: Path
    file_count: int
    evicted: List[Path]


class BackupArchiver:
    """Create timestamped archives of the data directory in retention buckets."""

    def __init__(
        self,
        source_directory: Path,
        backup_root: Path,
        *,
        capacity: int = 5,
        exclude: Iterable[Path] = (),
    ) -> None:
        if capacity < 1:
            raise ValueError("Backup capacity must be at least 1")
        self.source_directory = Path(source_directory)
        self.backup_root = Path(backup_root)
        self.capacity = capacity
        self.exclude = [Path(item) for item in exclude] + [self.backup_root]
        LOGGER.debug(
            "Backup archiver for %s -> %s (capacity %s)", self.source_directory, self.backup_root, capacity
        )

    def bucket_directory(self, bucket: RetentionBucket) -> Path:
        directory = self.backup_root / bucket.folder_name
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def list_archives(self, bucket: RetentionBucket) -> List[Path]:
        """Return the bucket's archives, oldest first."""

        prefix = f"backup-{bucket.value}-"
        archives = [
            path for path in self.bucket_directory(bucket).glob(f"{prefix}*.zip") if path.is_file()
        ]
        return sorted(archives, key=lambda path: path.name[len(prefix):])

    def create(self, bucket: RetentionBucket, now: Optional[datetime] = None) -> BackupRecord:
        """Write a new archive, evict the oldest down to ``capacity - 1``, then publish it.

        The archive is built under a hidden partial name first, so a failed
        run leaves the bucket exactly as it was.
        """

        now = now or datetime.now()
        directory = self.bucket_directory(bucket)
        destination = directory / f"backup-{bucket.value}-{now.strftime(TIMESTAMP_FORMAT)}.zip"
        partial = directory / f".partial-{destination.name}"
        try:
            file_count = zip_directory(self.source_directory, partial, exclude=self.exclude)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

        evicted: List[Path] = []
        archives = self.list_archives(bucket)
        while len(archives) >= self.capacity:
            oldest = archives.pop(0)
            oldest.unlink()
            evicted.append(oldest)
            LOGGER.warning("Deleted oldest %s backup: %s", bucket.value, oldest.name)

        os.replace(partial, destination)
        LOGGER.info("%s backup created: %s (%s files)", bucket.value.capitalize(), destination, file_count)
        return BackupRecord(bucket=bucket, path=destination, file_count=file_count, evicted=evicted)
