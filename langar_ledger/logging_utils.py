"""Mini README: Application-wide logging helpers for the langar ledger.

Structure:
    * level_for_environment - DEBUG while developing, INFO elsewhere.
    * configure_root_logger - install the console handler and set the level.
    * get_logger - module loggers that share the one console handler.

Usage:
    Every module calls ``get_logger(__name__)`` at import time, which installs
    the handler at INFO if nothing has yet. Entry points (the CLI and
    ``create_application``) then call
    ``configure_root_logger(environment=settings.environment)`` so the level
    follows the configured environment. Ledger mutations log at INFO, which
    makes the console an audit trail of amounts and attendance changes.
"""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DEBUG_ENVIRONMENTS = {"development", "dev", "local"}

_HANDLER: Optional[logging.Handler] = None


def level_for_environment(environment: str) -> int:
    return logging.DEBUG if environment.strip().lower() in DEBUG_ENVIRONMENTS else logging.INFO


def _install_handler() -> bool:
    """Attach the console handler once; return ``True`` if it was added now."""

    global _HANDLER
    if _HANDLER is not None:
        return False
    _HANDLER = logging.StreamHandler()
    _HANDLER.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logging.getLogger().addHandler(_HANDLER)
    return True


def configure_root_logger(level: Optional[int] = None, *, environment: Optional[str] = None) -> None:
    """Set the root level from ``level``, else from ``environment``, else INFO.

    Safe to call repeatedly: the handler is added once and later calls only
    change the level.
    """

    if level is None:
        level = level_for_environment(environment) if environment else logging.INFO
    _install_handler()
    logging.getLogger().setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if _install_handler():
        logging.getLogger().setLevel(logging.INFO)
    return logging.getLogger(name)
