"""
Aggregate click counter for Click Tracker.

Responsibilities:
    - Bump the per-link total once per counted click
    - Report totals for all links or an allow-list of links

Totals live in the storage backend, never in process memory, so several server
instances can share them. Reads never touch the click ledger.
"""

from typing import Any, Dict, Iterable, Optional

from ..storage.base import BaseStorage


class ClickCounter:
    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def increment_count(self, link_id: str, link_url: str) -> int:
        """
        Atomically add one to the link's total (creating it at 1).

        Args:
            link_id (str): Link whose total grows.
            link_url (str): Latest destination URL; overwrites the stored one.

        Returns:
            int: The new total.
        """
        return self.storage.increment_count(link_id, link_url)

    def get_stats(self, link_ids: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, Any]]:
        """
        Totals per link.

        Args:
            link_ids (Optional[Iterable[str]]): If given, only these links are returned.

        Returns:
            Dict[str, Dict[str, Any]]: link_id -> {"link_url": str, "total_count": int}

        Example:
            {"apk": {"link_url": "https://example.com/app.apk", "total_count": 12}}
        """
        if link_ids is not None:
            link_ids = list(link_ids)
        return self.storage.get_counters(link_ids)
