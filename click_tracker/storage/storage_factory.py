"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

Centralizes selection of the storage backend (in-memory vs Postgres) so the
rest of the app stays ignorant of where clicks live.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- CLICK_STORAGE_BACKEND: "memory" (default) or "postgres"
- CLICK_DB_DSN:          DSN string if backend=="postgres"
"""

import logging
import os
from typing import Optional

from click_tracker.storage.base import BaseStorage
from click_tracker.storage.storage import Storage

log = logging.getLogger("click_tracker.storage")


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads CLICK_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend. For postgres: dsn, connect_timeout,
        statement_timeout_ms, ensure_schema (bool).

    Raises
    ------
    ValueError
        Unknown backend, or postgres selected without a DSN.
    """
    be = (backend or os.getenv("CLICK_STORAGE_BACKEND", "memory")).strip().lower()
    log.debug("Selected storage backend: %r", be)

    if be == "memory":
        return Storage(lock_timeout=kwargs.get("lock_timeout"))

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("CLICK_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env CLICK_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from click_tracker.storage.db_storage import DBStorage

        storage = DBStorage(
            dsn=dsn,
            connect_timeout=kwargs.get("connect_timeout"),
            statement_timeout_ms=kwargs.get("statement_timeout_ms"),
        )
        if kwargs.get("ensure_schema"):
            storage.ensure_schema()
        return storage

    raise ValueError(f"Unknown storage backend: {be!r}")
