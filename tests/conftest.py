"""Shared fixtures: in-memory database and test settings."""

import pytest
import pytest_asyncio

from legisync.config import Settings
from legisync.db.session import Database

from .factories import make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def database(settings: Settings):
    db = Database(settings.db)
    await db.initialize()
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def no_retry_sleep(monkeypatch):
    """Make retry backoff instant."""
    monkeypatch.setattr("legisync.utils.retry.calculate_backoff", lambda **kwargs: 0.0)
