"""Routing key and timestamp key routes."""

import threading

from fastapi import APIRouter, Query

from keys.routing import RouteKey
from keys.timestamp_key import TimeStampKey
from utils.timestamp import format_timestamp

router = APIRouter(prefix="/api/v1/keys", tags=["keys"])

MAX_BATCH = 1000

# These will be set by app.py
_config = None
_stats = None


class IssueStats:
    __slots__ = ("route_keys", "timestamp_keys", "_lock")

    def __init__(self):
        self.route_keys = 0
        self.timestamp_keys = 0
        self._lock = threading.Lock()

    def add(self, route_keys=0, timestamp_keys=0):
        with self._lock:
            self.route_keys += route_keys
            self.timestamp_keys += timestamp_keys

    def to_dict(self):
        return {"route_keys": self.route_keys, "timestamp_keys": self.timestamp_keys}


def init(config, stats):
    """Initialize with keys config and issue counters."""
    global _config, _stats
    _config = config
    _stats = stats


@router.get("/route")
async def create_route_keys(count: int = Query(1, ge=1, le=MAX_BATCH)):
    """Generate one or more routing keys."""
    keys = [RouteKey.create() for _ in range(count)]
    _stats.add(route_keys=count)
    return {"keys": keys, "timestamp": format_timestamp()}


@router.get("/route/{key}")
async def parse_route_key(key: str, routes: int | None = None):
    """Route number and embedded timestamp of a routing key."""
    info = RouteKey.parse(key, _config.routes if routes is None else routes)
    return {**info.to_dict(), "timestamp": format_timestamp(info.timestamp_us)}


@router.get("/tx")
async def create_timestamp_key():
    """Generate a timestamp key."""
    key = TimeStampKey.create()
    _stats.add(timestamp_keys=1)
    return {"key": key, "timestamp_us": TimeStampKey.parse_timestamp(key)}


@router.get("/tx/{key}")
async def parse_timestamp_key(key: str):
    """Embedded timestamp of a timestamp key."""
    timestamp_us = TimeStampKey.parse_timestamp(key)
    return {"key": key, "timestamp_us": timestamp_us, "timestamp": format_timestamp(timestamp_us)}
