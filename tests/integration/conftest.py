"""Integration test fixtures: a live Redis server on db 15."""

from __future__ import annotations

import os

import pytest
import redis

from workledger.persistence.connection import connect

# db 15 is flushed around every test
REDIS_ENDPOINT = os.environ.get("WORKLEDGER_TEST_REDIS", "localhost:6379")
REDIS_DB = 15


def _redis_available() -> bool:
    """Check if Redis is reachable."""
    try:
        connect(REDIS_ENDPOINT, REDIS_DB, socket_timeout=0.5).close()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def redis_available() -> bool:
    return _redis_available()


@pytest.fixture
def live_session(redis_available) -> redis.Redis:
    if not redis_available:
        pytest.skip("Redis not available")
    session = connect(REDIS_ENDPOINT, REDIS_DB)
    session.flushdb()
    yield session
    session.flushdb()
    session.close()
