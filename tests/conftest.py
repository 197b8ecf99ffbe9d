"""Pytest fixtures and configuration for mlotasks tests."""

import pytest
from datetime import datetime, timedelta, timezone

from mlotasks.errors import StorageError
from mlotasks.organizer import Organizer
from mlotasks.repositories import ContextRepository, SettingsRepository, TaskRepository, ViewRepository
from mlotasks.storage.local import LocalStorage


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


class FlakyStorage(LocalStorage):
    """LocalStorage whose writes and/or reads can be switched to fail."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_writes = False
        self.fail_reads = False
        self.writes = 0

    def _get_item(self, key, default):
        if self.fail_reads:
            raise StorageError(f"Simulated read failure for {key}")
        return super()._get_item(key, default)

    def _set_item(self, key, value):
        if self.fail_writes:
            raise StorageError(f"Simulated write failure for {key}")
        self.writes += 1
        super()._set_item(key, value)


@pytest.fixture(scope="function")
def storage():
    """Fresh in-memory local storage for each test.

    `build_engine` uses a StaticPool for `:memory:` URLs so every session
    shares the same database.
    """
    store = FlakyStorage(database_url=TEST_DATABASE_URL)
    store.init()
    try:
        yield store
    finally:
        store.engine.dispose()


@pytest.fixture
def task_repository(storage):
    """Create a loaded TaskRepository instance for testing."""
    repo = TaskRepository(storage)
    repo.init()
    return repo


@pytest.fixture
def context_repository(storage):
    repo = ContextRepository(storage)
    repo.init()
    return repo


@pytest.fixture
def view_repository(storage):
    """ViewRepository after init (built-in views seeded)."""
    repo = ViewRepository(storage)
    repo.init()
    return repo


@pytest.fixture
def settings_repository(storage):
    repo = SettingsRepository(storage)
    repo.init()
    return repo


@pytest.fixture
def organizer(storage):
    org = Organizer(storage)
    org.init()
    return org


@pytest.fixture
def now():
    """Fixed reference instant for time-dependent queries."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def yesterday(now):
    return (now - timedelta(days=1)).date()


@pytest.fixture
def tomorrow(now):
    return (now + timedelta(days=1)).date()


@pytest.fixture
def test_client(storage):
    """Create a FastAPI test client with the storage dependency overridden."""
    from fastapi.testclient import TestClient
    from mlotasks.api.app import app, get_storage

    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
