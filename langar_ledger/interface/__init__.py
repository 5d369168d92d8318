"""Mini README: HTTP interface for the langar ledger.

Exports the FastAPI application factory used by ``main_ledger_server.py``
and by the HTTP tests.
"""

from .web_app import create_application

__all__ = ["create_application"]
