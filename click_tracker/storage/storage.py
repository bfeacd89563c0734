"""
Storage module for Click Tracker (in-memory implementation).

Responsibilities:
    - Keep the click ledger with a unique (visitor_id, link_id, day) key
    - Keep one running counter per link
    - Answer per-visitor, per-day lookups

Design:
    - Reference implementation of the BaseStorage contract, used by default and
      throughout the tests.
    - A single lock makes each call atomic inside one process. It plays the role
      of the unique index / upsert of the Postgres backend. It does not protect
      several server processes; run the Postgres backend for that.
    - The lock is taken with a timeout; a stuck store raises StorageUnavailable
      instead of blocking the request forever.
"""

import contextlib
import logging
import threading
from typing import Any, Dict, Iterable, Optional, Set, Tuple

from ..config import settings
from ..errors import StorageUnavailable
from ..models import ClickRecord, LinkCounter
from .base import BaseStorage

log = logging.getLogger("click_tracker.storage")


class Storage(BaseStorage):
    def __init__(self, lock_timeout: Optional[float] = None):
        """
        Initialize empty ledger and counter stores.

        Internal schema:
            self.clicks   = { (visitor_id, link_id, day): ClickRecord }
            self.counters = { link_id: LinkCounter }
        """
        self.clicks: Dict[Tuple[str, str, str], ClickRecord] = {}
        self.counters: Dict[str, LinkCounter] = {}
        self.lock_timeout = settings.LOCK_TIMEOUT if lock_timeout is None else lock_timeout
        self._lock = threading.Lock()

    @contextlib.contextmanager
    def _locked(self):
        if not self._lock.acquire(timeout=self.lock_timeout):
            log.warning("In-memory store lock not acquired within %.2fs", self.lock_timeout)
            raise StorageUnavailable("Storage lock timeout")
        try:
            yield
        finally:
            self._lock.release()

    def insert_click(self, record: ClickRecord) -> bool:
        """
        Insert a ledger row if its key is free.

        Returns:
            bool: True if inserted, False if (visitor_id, link_id, day) already exists.
        """
        with self._locked():
            if record.key in self.clicks:
                return False
            self.clicks[record.key] = record
            return True

    def increment_count(self, link_id: str, link_url: str) -> int:
        """
        Upsert-increment the counter for `link_id`.

        Returns:
            int: New total for the link.
        """
        with self._locked():
            counter = self.counters.get(link_id)
            if counter is None:
                counter = self.counters[link_id] = LinkCounter(link_id=link_id, link_url=link_url)
            counter.total_count += 1
            counter.link_url = link_url
            return counter.total_count

    def get_counters(self, link_ids: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, Any]]:
        wanted = None if link_ids is None else set(link_ids)
        with self._locked():
            return {
                link_id: counter.as_stats()
                for link_id, counter in self.counters.items()
                if wanted is None or link_id in wanted
            }

    def clicked_links(self, visitor_id: str, day: str) -> Set[str]:
        with self._locked():
            return {
                link_id
                for (v_id, link_id, d) in self.clicks
                if v_id == visitor_id and d == day
            }

    def count_clicks(self, link_id: str) -> int:
        with self._locked():
            return sum(1 for (_, l_id, _) in self.clicks if l_id == link_id)
