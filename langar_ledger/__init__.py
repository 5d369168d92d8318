"""Mini README: Core package initializer for the langar ledger backend.

The package keeps a community kitchen's records in flat JSON documents:
member roster, attendance, donations and fines, expenses and periodic
backups. ``stores.LedgerStores`` builds every ledger over a data directory
and ``interface.create_application`` serves them over HTTP.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
