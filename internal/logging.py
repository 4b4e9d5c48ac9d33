"""JSON-lines logging for the key service."""

import json
import sys
import threading
from enum import IntEnum

from utils.timestamp import ClockError, format_timestamp


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def parse(cls, name, default=None):
        """Level from a config string; WARNING is accepted for WARN."""
        name = (name or "").upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            return default if default is not None else cls.INFO


def _timestamp():
    # a broken clock must not silence the log
    try:
        return format_timestamp()
    except ClockError:
        return None


_logger = None
_logger_lock = threading.Lock()


class StructuredLogger:
    """One JSON object per line, written to ``stream`` (stderr by default).

    ``fields`` are merged into every record; ``bind`` returns a logger with
    more of them.
    """

    def __init__(self, level=LogLevel.INFO, stream=None, **fields):
        self.level = level
        self.stream = stream
        self.fields = fields

    def bind(self, **fields):
        return type(self)(self.level, self.stream, **{**self.fields, **fields})

    def record(self, level, message, error=None, **kwargs):
        record = {"timestamp": _timestamp(), "level": level.name, "msg": message, **self.fields, **kwargs}
        if error:
            record["err"] = str(error)
        return record

    def log(self, level, message, error=None, **kwargs):
        if level < self.level:
            return
        line = json.dumps(self.record(level, message, error, **kwargs), default=str)
        try:
            print(line, file=sys.stderr if self.stream is None else self.stream, flush=True)
        except OSError:
            pass

    def info(self, message, **kwargs):
        self.log(LogLevel.INFO, message, **kwargs)

    def warn(self, message, error=None, **kwargs):
        self.log(LogLevel.WARN, message, error, **kwargs)

    def error(self, message, error=None, **kwargs):
        self.log(LogLevel.ERROR, message, error, **kwargs)

    @classmethod
    def configure(cls, min_level=LogLevel.INFO, stream=None, **fields):
        global _logger
        with _logger_lock:
            _logger = cls(min_level, stream, **fields)


def get_logger():
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger()
    return _logger
