"""Pytest fixtures for all tests."""

import pytest
from httpx import AsyncClient, ASGITransport

from api.app import create_app
from config import Config, KeysConfig

# Key: YM6I7clU96YvDTCr, TimeStamp: 1664899323738819
KNOWN_KEY = "YM6I7clU96YvDTCr"
KNOWN_MICROS = 1664899323738819


@pytest.fixture
def known_key():
    """A routing key with a known timestamp."""
    return KNOWN_KEY


@pytest.fixture
def known_micros():
    """Timestamp embedded in the known key."""
    return KNOWN_MICROS


@pytest.fixture
def frozen_clock(monkeypatch):
    """Pin the clock seen by the key generators to KNOWN_MICROS."""
    nanos = KNOWN_MICROS * 1_000 + 417
    monkeypatch.setattr("keys.routing.now_nanos", lambda: nanos)
    monkeypatch.setattr("keys.timestamp_key.now_micros", lambda: KNOWN_MICROS)
    return nanos


@pytest.fixture
def fixed_random(monkeypatch):
    """Make secrets.randbelow return a chosen value."""
    def pin(value):
        monkeypatch.setattr("secrets.randbelow", lambda upper: value)
    return pin


@pytest.fixture
def config():
    """Default config with 10 routes."""
    return Config(keys=KeysConfig(routes=10))


@pytest.fixture
async def app(config):
    """Create test FastAPI app."""
    return create_app(config)


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

