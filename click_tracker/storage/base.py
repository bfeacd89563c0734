"""
Base storage interface for Click Tracker.

Purpose:
    Define a small, stable contract that the in-memory and Postgres backends
    implement, so the ledger, counter and manager never care where data lives.

Atomicity contract:
    - `insert_click` is an insert guarded by a unique key on
      (visitor_id, link_id, day). Concurrent inserts of the same key: exactly
      one returns True.
    - `increment_count` is a single upsert-increment. Never read-modify-write.

Failures:
    Backends raise `StorageUnavailable` for timeouts and driver errors.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Set

from ..models import ClickRecord


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def insert_click(self, record: ClickRecord) -> bool:
        """
        Append a ledger row unless its (visitor_id, link_id, day) key exists.

        Returns:
            bool: True if the row was inserted, False if the key was taken.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def increment_count(self, link_id: str, link_url: str) -> int:
        """
        Add one to the link's total, creating the counter at 1 if absent.
        Overwrites the stored link_url.

        Returns:
            int: The new total.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_counters(self, link_ids: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, Any]]:
        """
        Read counters, optionally restricted to `link_ids`.

        Returns:
            Dict[str, Dict[str, Any]]: link_id -> {"link_url", "total_count"}.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def clicked_links(self, visitor_id: str, day: str) -> Set[str]:
        """Link ids the visitor has a ledger row for on `day`."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def count_clicks(self, link_id: str) -> int:
        """Number of ledger rows for `link_id` (consistency checks)."""
        raise NotImplementedError
