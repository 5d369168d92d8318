"""Mini README: Entry point CLI for the langar ledger service.

This script exposes a Typer CLI to start the FastAPI application, take an
on-demand backup into one of the retention buckets, and finish a member
removal that was interrupted by a crash. Settings come from ``LANGAR_*``
environment variables or a ``.env`` file.
"""

from __future__ import annotations

import typer
import uvicorn

from langar_ledger.backups import BackupArchiver, RetentionBucket
from langar_ledger.configuration import get_settings
from langar_ledger.logging_utils import configure_root_logger
from langar_ledger.stores import LedgerStores

cli = typer.Typer(help="Run and maintain the langar ledger backend.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(environment=settings.environment)

    # 0.0.0.0 is a bind address, not something a browser can open.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(f"Server running on http://{browser_host}:{effective_port}")
    uvicorn.run(
        "langar_ledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def backup(
    bucket: RetentionBucket = typer.Argument(RetentionBucket.DAILY, help="Retention bucket to write to."),
) -> None:
    """Archive the data directory into a bucket now, rotating old archives."""

    settings = get_settings()
    configure_root_logger(environment=settings.environment)
    archiver = BackupArchiver(
        settings.data_directory,
        settings.backup_path,
        capacity=settings.backup_capacity,
        exclude=[settings.uploads_path],
    )
    record = archiver.create(bucket)
    typer.echo(f"Wrote {record.path} ({record.file_count} files, {len(record.evicted)} evicted)")


@cli.command()
def recover() -> None:
    """Complete a member removal left unfinished by a crash."""

    settings = get_settings()
    configure_root_logger(environment=settings.environment)
    stores = LedgerStores.from_directory(settings.data_directory, settings.uploads_path)
    outcome = stores.removal.recover()
    if outcome is None:
        typer.echo("No interrupted removal found.")
        return
    typer.echo(f"Completed removal of roll {outcome.roll_no}; {outcome.removed_total} moved to donatedRemoved.")


if __name__ == "__main__":
    cli()
