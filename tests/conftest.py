"""Shared test configuration and fixtures."""
from unittest.mock import MagicMock

import mongomock
import pytest

from optail.config.config_manager import LoggingConfig
from optail.logging.logging_config import configure_logging


class FakeTailableCursor:
    """Stand-in for a tailable-await pymongo cursor.

    ``results`` is consumed one fetch at a time: a mapping is returned as the
    next entry, ``None`` means nothing is available right now, and an
    exception instance is raised.
    """

    def __init__(self, results=None):
        self.results = list(results or [])
        self.fetches = 0
        self.alive = True
        self.closed = False
        self.await_time_ms = None

    def max_await_time_ms(self, ms):
        self.await_time_ms = ms
        return self

    def try_next(self):
        self.fetches += 1
        if not self.results:
            return None
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    def close(self):
        self.closed = True
        self.alive = False


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep diagnostics off stdout during tests."""
    configure_logging(LoggingConfig(level="WARNING"))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove optail environment overrides from the test environment."""
    for key in ("OPTAIL_HOST", "OPTAIL_PORT", "OPTAIL_DEBUG",
                "OPTAIL_POLL_INTERVAL", "OPTAIL_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def oplog():
    """An in-memory oplog collection."""
    return mongomock.MongoClient()["local"]["oplog.rs"]


@pytest.fixture
def mock_oplog():
    """A mock oplog collection whose find() returns a FakeTailableCursor."""
    collection = MagicMock()
    collection.full_name = "local.oplog.rs"
    collection.find.return_value = FakeTailableCursor()
    return collection


@pytest.fixture
def make_cursor():
    """Factory for FakeTailableCursor instances."""
    return FakeTailableCursor
