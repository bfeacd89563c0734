"""
Record types persisted by Click Tracker.

ClickRecord  : one ledger row per counted (visitor, link, day).
LinkCounter  : one running total per link.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple

from .daykey import utc_now


@dataclass(frozen=True)
class ClickRecord:
    visitor_id: str
    link_id: str
    link_url: str
    day: str
    created_at: datetime = field(default_factory=utc_now)

    @property
    def key(self) -> Tuple[str, str, str]:
        """Unique ledger key (visitor_id, link_id, day)."""
        return (self.visitor_id, self.link_id, self.day)


@dataclass
class LinkCounter:
    link_id: str
    link_url: str
    total_count: int = 0
    created_at: datetime = field(default_factory=utc_now)

    def as_stats(self) -> Dict[str, Any]:
        return {"link_url": self.link_url, "total_count": self.total_count}
