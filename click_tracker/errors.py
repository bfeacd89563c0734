"""
Error taxonomy for Click Tracker.

- InvalidInput       : caller error (missing/empty field, unknown link). Not retried.
- StorageUnavailable : transient storage failure (timeout, lost connection).
                       Callers may retry the whole click; the ledger's unique key
                       keeps a retry from double counting.

A duplicate click is not an error. It is the `ALREADY_CLICKED` result of
`ClickLedger.record_click`.
"""

__all__ = ["ClickTrackerError", "InvalidInput", "StorageUnavailable"]


class ClickTrackerError(Exception):
    """Base class for all click tracker errors."""


class InvalidInput(ClickTrackerError, ValueError):
    """A required field is missing, empty or not accepted."""


class StorageUnavailable(ClickTrackerError, RuntimeError):
    """The storage backend could not complete the call in time."""
