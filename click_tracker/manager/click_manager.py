"""
ClickManager module for Click Tracker.

Responsibilities:
    - Validate click input
    - Run the insert-then-increment protocol: ledger first, counter only
      when the ledger accepted a new (visitor, link, day)
    - Serve stats and "already clicked today" lookups
    - Issue fresh visitor identifiers

Consistency notes:
    - Per-link totals equal the number of ledger rows for that link because the
      counter is only bumped after a successful ledger insert.
    - If the ledger insert commits but the counter increment fails, the click is
      recorded but never counted. A retry sees ALREADY_CLICKED, so the total
      stays one short for that click. This window is accepted: it is logged and
      surfaced as StorageUnavailable, with no compensation or retry.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Any, Dict, Iterable, Optional, Set

from ..analytics.counter import ClickCounter
from ..config import settings
from ..daykey import local_day_key, utc_now
from ..errors import InvalidInput, StorageUnavailable
from ..ledger.ledger import ClickLedger, RecordResult
from ..storage.base import BaseStorage

log = logging.getLogger("click_tracker.manager")


@dataclass(frozen=True)
class ClickResult:
    counted: bool
    total_count: Optional[int] = None


class ClickManager:
    """
    Coordinates the ledger and counter for each click.
    """

    def __init__(
        self,
        storage: BaseStorage,
        allowed_links: Optional[AbstractSet[str]] = None,
    ):
        """
        Args:
            storage (BaseStorage): Backend shared by the ledger and the counter.
            allowed_links (Optional[AbstractSet[str]]): Accepted link ids. Defaults to
                settings.ALLOWED_LINKS; an empty set accepts any non-empty link id.
        """
        self.storage = storage
        self.ledger = ClickLedger(storage)
        self.counter = ClickCounter(storage)
        self.allowed_links = frozenset(settings.ALLOWED_LINKS if allowed_links is None else allowed_links)

    # ---------------------------------------------------------------------
    # Validation Helpers
    # ---------------------------------------------------------------------
    @staticmethod
    def _require(**fields: Any) -> None:
        missing = [name for name, value in fields.items() if not isinstance(value, str) or not value.strip()]
        if missing:
            raise InvalidInput(f"Missing parameters: {', '.join(missing)}")

    def _validate_link(self, link_id: str) -> None:
        if self.allowed_links and link_id not in self.allowed_links:
            raise InvalidInput(f"Unknown link: {link_id}")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    @staticmethod
    def register_visitor() -> str:
        """Issue a fresh opaque visitor identifier."""
        return str(uuid.uuid4())

    def process_click(
        self,
        visitor_id: str,
        link_id: str,
        link_url: str,
        now: Optional[datetime] = None,
    ) -> ClickResult:
        """
        Count a click at most once per visitor, link and day.

        Rules:
            - All fields must be non-empty strings; otherwise InvalidInput and
              nothing is written.
            - First click of the day -> ledger row + counter increment ->
              ClickResult(counted=True, total_count=<new total>).
            - Repeat click -> ClickResult(counted=False), no writes.

        Raises:
            InvalidInput: Missing/empty field or link not in the allow-list.
            StorageUnavailable: Backend failure or timeout.
        """
        self._require(visitor_id=visitor_id, link_id=link_id, link_url=link_url)
        self._validate_link(link_id)
        now = now or utc_now()

        if self.ledger.record_click(visitor_id, link_id, link_url, now) is RecordResult.ALREADY_CLICKED:
            return ClickResult(counted=False)

        try:
            total = self.counter.increment_count(link_id, link_url)
        except StorageUnavailable:
            log.error(
                "Click recorded but not counted: visitor=%s link=%s day=%s",
                visitor_id, link_id, local_day_key(now),
            )
            raise
        log.debug("Counted click visitor=%s link=%s total=%d", visitor_id, link_id, total)
        return ClickResult(counted=True, total_count=total)

    def get_stats(self, link_ids: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, Any]]:
        """Per-link totals, optionally limited to `link_ids`."""
        return self.counter.get_stats(link_ids)

    def list_clicked_links_today(self, visitor_id: str, now: Optional[datetime] = None) -> Set[str]:
        """
        Link ids the visitor has already been counted for today.

        Raises:
            InvalidInput: If visitor_id is empty.
        """
        self._require(visitor_id=visitor_id)
        return self.ledger.clicked_links(visitor_id, now)
