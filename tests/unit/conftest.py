"""Shared fixtures: fakeredis sessions on one server model concurrent workers."""

from __future__ import annotations

import fakeredis
import pytest

FIXED_NOW = 1_700_000_000.0  # seconds; registries store milliseconds
FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture
def fake_server():
    return fakeredis.FakeServer()


@pytest.fixture
def session(fake_server):
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def other_session(fake_server):
    """A second worker's connection to the same store."""
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def now_ms():
    return FIXED_NOW_MS
