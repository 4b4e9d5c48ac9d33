from utils.base62 import encode, decode
from utils.timestamp import now_micros, format_timestamp
from keys.routing import RouteKey
from keys.timestamp_key import TimeStampKey
from core.errors import DomainKeyError, Base62Error, RouteKeyError

__all__ = [
    "encode",
    "decode",
    "now_micros",
    "format_timestamp",
    "RouteKey",
    "TimeStampKey",
    "DomainKeyError",
    "Base62Error",
    "RouteKeyError",
]
