"""
Day-key derivation for click deduplication.

A visitor may be counted once per link per calendar day. The calendar is the
one of Africa/Nairobi, a fixed UTC+3 offset with no daylight-saving rules, so a
plain `timezone(timedelta(hours=3))` is exact and needs no tz database.

Day keys are ISO dates (`YYYY-MM-DD`). They are part of the ledger's identity
key, so this format must never change.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

NAIROBI = timezone(timedelta(hours=3), "Africa/Nairobi")
DAY_KEY_FORMAT = "%Y-%m-%d"


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(instant: Optional[datetime] = None) -> datetime:
    """Aware UTC datetime for `instant` (now when omitted). Naive values are taken to be UTC."""
    if instant is None:
        return utc_now()
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def local_day(instant: Optional[datetime] = None) -> date:
    """Calendar date of `instant` in the fixed tracker timezone."""
    return as_utc(instant).astimezone(NAIROBI).date()


def local_day_key(instant: Optional[datetime] = None) -> str:
    """
    Day key for `instant`.

    >>> local_day_key(datetime(2024, 5, 1, 20, 59, 59, tzinfo=timezone.utc))
    '2024-05-01'
    >>> local_day_key(datetime(2024, 5, 1, 21, 0, 0, tzinfo=timezone.utc))
    '2024-05-02'
    """
    return local_day(instant).strftime(DAY_KEY_FORMAT)
