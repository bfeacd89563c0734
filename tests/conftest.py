"""
Global pytest fixtures for the Click Tracker test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide an isolated in-memory Storage for direct testing
    - Provide a ClickManager wired to that Storage
    - Provide fixed instants around the Nairobi (UTC+3) day boundary

Using `create_app(storage=...)` gives every test its own in-memory state, so
click counts never leak between tests.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from click_tracker.storage.storage import Storage
from click_tracker.manager.click_manager import ClickManager


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def manager(storage: Storage) -> ClickManager:
    """ClickManager wired to the storage fixture, with no link allow-list."""
    return ClickManager(storage=storage, allowed_links=frozenset())


@pytest.fixture
def client(storage: Storage) -> TestClient:
    """Fresh TestClient over a new app instance sharing the storage fixture."""
    return TestClient(create_app(storage=storage))


@pytest.fixture
def noon() -> datetime:
    """2024-05-01 12:00 in Nairobi."""
    return datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def last_second() -> datetime:
    """2024-05-01 23:59:59 in Nairobi."""
    return datetime(2024, 5, 1, 20, 59, 59, tzinfo=timezone.utc)


@pytest.fixture
def next_day_start() -> datetime:
    """2024-05-02 00:00:01 in Nairobi."""
    return datetime(2024, 5, 1, 21, 0, 1, tzinfo=timezone.utc)
