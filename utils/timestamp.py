"""Microsecond timestamp utilities."""

import time
from datetime import datetime, timezone


class ClockError(RuntimeError):
    """Host clock reports a time before the Unix epoch. Not recoverable."""


def now_nanos():
    """Current time in nanoseconds since Unix epoch."""
    nanos = time.time_ns()
    if nanos < 0:
        raise ClockError("System time before Unix epoch")
    return nanos


def now_micros():
    """Current time in microseconds since Unix epoch."""
    return now_nanos() // 1_000


def format_timestamp(epoch_us=None):
    """Format timestamp as ISO 8601 with microseconds."""
    if epoch_us is None:
        epoch_us = now_micros()

    seconds, micros = divmod(epoch_us, 1_000_000)
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=micros)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z"
