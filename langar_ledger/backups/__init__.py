"""Mini README: Periodic backups of the ledger documents.

``archiver`` writes and rotates the ZIP archives; ``schedule`` decides when
each retention bucket is due.
"""

from .archiver import BackupArchiver, BackupRecord, RetentionBucket, zip_directory
from .schedule import DEFAULT_SCHEDULES, BackupSchedule, BackupScheduler

__all__ = [
    "BackupArchiver",
    "BackupRecord",
    "BackupSchedule",
    "BackupScheduler",
    "DEFAULT_SCHEDULES",
    "RetentionBucket",
    "zip_directory",
]
