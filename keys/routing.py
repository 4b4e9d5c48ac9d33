"""
Routing keys.

Fixed-width, roughly time-ordered identifiers that carry a route number in
their first two characters.

Layout (16 chars): 4 random + 9 timestamp (base62 micros) + 3 random.
The random field is a 7 char base62 number padded with "0"; the timestamp is
inserted into it at ROUTE_TIMESTAMP_OFFSET.
"""

import operator
import secrets

from core.errors import (
    Base62Error,
    InvalidBase62Error,
    InvalidSizeError,
    KeyLayoutError,
    KeyParseError,
)
from utils import base62
from utils.timestamp import now_nanos

ROUTE_KEY_SIZE = 16
ROUTE_TIMESTAMP_OFFSET = 4
ROUTE_TIMESTAMP_SIZE = 9
ROUTE_PREFIX_SIZE = 2

RANDOM_FIELD_SIZE = 7
MIN_RANDOM = 14_776_336  # "10000"
MAX_RANDOM = 3_521_614_606_207  # "zzzzzzz"

MIN_ROUTES = 1
MAX_ROUTES = 128


class RouteKeyInfo:
    __slots__ = ("key", "route", "routes", "timestamp_us")

    def __init__(self, key, route, routes, timestamp_us):
        self.key = key
        self.route = route
        self.routes = routes
        self.timestamp_us = timestamp_us

    def to_dict(self):
        return {
            "key": self.key,
            "route": self.route,
            "routes": self.routes,
            "timestamp_us": self.timestamp_us,
        }


def clamp_routes(total_routes):
    """Bound the route count to what a two character prefix can spread over.

    Raises TypeError for counts that are not integers.
    """
    return max(MIN_ROUTES, min(MAX_ROUTES, operator.index(total_routes)))


def random_field():
    """Base62 random number padded to 7 chars."""
    value = MIN_RANDOM + secrets.randbelow(MAX_RANDOM - MIN_RANDOM + 1)
    return base62.encode(value, width=RANDOM_FIELD_SIZE)


class RouteKey:
    """Create and parse 16 character routing keys."""

    @staticmethod
    def create():
        """Generate a new routing key."""
        micros = now_nanos() // 1_000
        stamp = base62.encode(micros)
        pad = random_field()

        key = pad[:ROUTE_TIMESTAMP_OFFSET] + stamp + pad[ROUTE_TIMESTAMP_OFFSET:]
        if len(key) != ROUTE_KEY_SIZE:
            raise KeyLayoutError(key, ROUTE_KEY_SIZE)
        return key

    @staticmethod
    def parse_route(key, total_routes):
        """Route number in [0, total_routes) from the first two chars of the key."""
        if len(key) < ROUTE_PREFIX_SIZE:
            raise InvalidSizeError(key, f">= {ROUTE_PREFIX_SIZE}")

        routes = clamp_routes(total_routes)
        try:
            prefix = base62.decode(key[:ROUTE_PREFIX_SIZE])
        except Base62Error as exc:
            raise InvalidBase62Error(
                f"Route prefix of {key!r} is not base62", key=key, cause=exc
            ) from exc
        return prefix % routes

    @staticmethod
    def parse_timestamp(key):
        """Embedded timestamp in microseconds since Unix epoch."""
        if len(key) != ROUTE_KEY_SIZE:
            raise InvalidSizeError(key, ROUTE_KEY_SIZE)

        end = ROUTE_TIMESTAMP_OFFSET + ROUTE_TIMESTAMP_SIZE
        try:
            return base62.decode(key[ROUTE_TIMESTAMP_OFFSET:end])
        except Base62Error as exc:
            raise KeyParseError(
                f"Timestamp field of {key!r} is not base62", key=key, cause=exc
            ) from exc

    @classmethod
    def parse(cls, key, total_routes=MIN_ROUTES):
        """Route and timestamp of a key in one call."""
        timestamp_us = cls.parse_timestamp(key)
        route = cls.parse_route(key, total_routes)
        return RouteKeyInfo(key, route, clamp_routes(total_routes), timestamp_us)
