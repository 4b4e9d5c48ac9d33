"""
Timestamp keys.

12 char keys: 9 chars of base62 microseconds followed by 3 random chars.
Sort by creation time to the microsecond.
"""

import secrets

from core.errors import Base62Error, InvalidSizeError, KeyLayoutError, KeyParseError
from utils import base62
from utils.timestamp import now_micros

TIMESTAMP_KEY_SIZE = 12
TIMESTAMP_FIELD_SIZE = 9
SUFFIX_SIZE = TIMESTAMP_KEY_SIZE - TIMESTAMP_FIELD_SIZE


class TimeStampKey:
    """Create and parse 12 character timestamp keys."""

    @staticmethod
    def create():
        stamp = base62.encode(now_micros())
        suffix = base62.encode(secrets.randbelow(base62.RADIX**SUFFIX_SIZE), width=SUFFIX_SIZE)

        key = stamp + suffix
        if len(key) != TIMESTAMP_KEY_SIZE:
            raise KeyLayoutError(key, TIMESTAMP_KEY_SIZE)
        return key

    @staticmethod
    def parse_timestamp(key):
        if len(key) != TIMESTAMP_KEY_SIZE:
            raise InvalidSizeError(key, TIMESTAMP_KEY_SIZE)

        try:
            return base62.decode(key[:TIMESTAMP_FIELD_SIZE])
        except Base62Error as exc:
            raise KeyParseError(
                f"Timestamp field of {key!r} is not base62", key=key, cause=exc
            ) from exc
