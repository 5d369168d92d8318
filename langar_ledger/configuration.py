"""Mini README: Centralised configuration for the langar ledger service.

Structure:
    * LedgerSettings - Pydantic settings model read from ``LANGAR_*`` variables.
    * get_settings - cached accessor shared by the CLI and the web factory.

Usage:
    ``get_settings()`` is what production code calls. Tests construct
    ``LedgerSettings(data_directory=tmp_path)`` directly and hand it to
    ``create_application`` so nothing touches the real data folder.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class LedgerSettings(BaseSettings):
    """Runtime configuration for the ledger backend."""

    environment: str = Field(
        "development",
        description="Environment label; development logs at DEBUG, anything else at INFO.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the JSON ledger documents.",
    )
    uploads_directory: Optional[Path] = Field(
        None,
        description="Directory for member images. Defaults to <data_directory>/uploads.",
    )
    backup_directory: Optional[Path] = Field(
        None,
        description="Root of the daily/weekly/monthly backup buckets. Defaults to ./backup.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        5000,
        description="Port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    allowed_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5000",
            "http://localhost:3000",
        ],
        description="Origins accepted by the CORS middleware.",
    )
    backup_capacity: int = Field(
        5,
        description="Maximum number of archives retained per backup bucket.",
        ge=1,
    )
    backup_schedule_enabled: bool = Field(
        False,
        description="Start the calendar-driven backup loop with the web application.",
    )
    backup_poll_seconds: float = Field(
        60.0,
        description="How often the backup loop checks for due buckets.",
        gt=0,
    )

    class Config:
        env_prefix = "LANGAR_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: str | Path) -> Path:
        """Expand user directories and make sure the data folder exists."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("uploads_directory", "backup_directory", pre=True)
    def _expand_optional_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value is None or value == "":
            return None
        return Path(value).expanduser().resolve()

    @property
    def uploads_path(self) -> Path:
        """Resolved uploads directory, created on first access."""

        path = self.uploads_directory or self.data_directory / "uploads"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def backup_path(self) -> Path:
        """Resolved backup root, created on first access."""

        path = self.backup_directory or self.data_directory.parent / "backup"
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache()
def get_settings() -> LedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return LedgerSettings()
