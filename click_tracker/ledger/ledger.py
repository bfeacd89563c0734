"""
Deduplication ledger for Click Tracker.

Responsibilities:
    - Turn a click into a ClickRecord keyed by (visitor_id, link_id, day)
    - Report whether that key was new (INSERTED) or already counted today
      (ALREADY_CLICKED)
    - List the links a visitor has already clicked today

The storage backend's unique key is the only guard against double counting.
The ledger never checks before inserting; a rejected insert is the normal
ALREADY_CLICKED branch, not an error.
"""

import enum
import logging
from datetime import datetime
from typing import Optional, Set

from ..daykey import as_utc, local_day_key
from ..models import ClickRecord
from ..storage.base import BaseStorage

log = logging.getLogger("click_tracker.ledger")


class RecordResult(enum.Enum):
    INSERTED = "inserted"
    ALREADY_CLICKED = "already_clicked"


class ClickLedger:
    """Append-only click record store with one row per visitor, link and day."""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def record_click(
        self,
        visitor_id: str,
        link_id: str,
        link_url: str,
        now: Optional[datetime] = None,
    ) -> RecordResult:
        """
        Record a click for today's day key.

        Args:
            visitor_id (str): Opaque visitor identifier.
            link_id (str): Clicked link.
            link_url (str): Destination URL (informational).
            now (Optional[datetime]): Click instant; defaults to the current UTC time.

        Returns:
            RecordResult: INSERTED for the first click of the day, ALREADY_CLICKED otherwise.

        Raises:
            StorageUnavailable: If the backend fails or times out.
        """
        now = as_utc(now)
        record = ClickRecord(
            visitor_id=visitor_id,
            link_id=link_id,
            link_url=link_url,
            day=local_day_key(now),
            created_at=now,
        )
        if self.storage.insert_click(record):
            return RecordResult.INSERTED
        log.debug("Duplicate click visitor=%s link=%s day=%s", visitor_id, link_id, record.day)
        return RecordResult.ALREADY_CLICKED

    def clicked_links(self, visitor_id: str, now: Optional[datetime] = None) -> Set[str]:
        """Link ids the visitor already has a record for on the current day."""
        return self.storage.clicked_links(visitor_id, local_day_key(now))
