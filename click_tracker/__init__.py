"""
click_tracker package initializer.
"""

from . import analytics
from . import ledger
from . import manager
from . import storage

__all__ = ["analytics", "ledger", "manager", "storage"]
