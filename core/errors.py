"""Custom errors with tracking IDs."""

from utils.timestamp import ClockError, format_timestamp

_UNSET = object()


def _tracking_id():
    # keys.timestamp_key imports the codec, which imports this module
    from keys.timestamp_key import TimeStampKey
    try:
        return TimeStampKey.create()
    except ClockError:
        return None


def _tracking_timestamp():
    try:
        return format_timestamp()
    except ClockError:
        return None


class DomainKeyError(Exception):
    """Base error with unique ID and timestamp for tracking.

    Raising one never touches the clock or the entropy source. The tracking
    ID and timestamp are filled in on first read and stay None when the
    clock is broken.
    """

    def __init__(self, message, context=None, cause=None, error_id=None):
        super().__init__(message)
        self._error_id = error_id or _UNSET
        self._timestamp = _UNSET
        self.context = context or {}
        self.cause = cause

    @property
    def error_id(self):
        if self._error_id is _UNSET:
            self._error_id = _tracking_id()
        return self._error_id

    @property
    def timestamp(self):
        if self._timestamp is _UNSET:
            self._timestamp = _tracking_timestamp()
        return self._timestamp

    def __str__(self):
        if self.error_id is None:
            return super().__str__()
        return f"[{self.error_id}] {super().__str__()}"

    @property
    def message(self):
        return super().__str__()

    def to_dict(self):
        return {
            "error": type(self).__name__,
            "msg": self.message,
            "error_id": self.error_id,
            "timestamp": self.timestamp,
            "context": self.context,
        }


class Base62Error(DomainKeyError):
    """Base62 decode failures."""


class EmptyInputError(Base62Error):
    """Decode called on a zero-length string."""

    def __init__(self, message="Cannot decode an empty base62 string", **kwargs):
        super().__init__(message, **kwargs)


class InvalidCharacterError(Base62Error):
    """Character outside the 62-symbol alphabet."""

    def __init__(self, char, position=None, **kwargs):
        context = kwargs.pop("context", {})
        context["char"] = char
        if position is not None:
            context["position"] = position
        self.char = char
        self.position = position
        super().__init__(f"Invalid base62 character: {char!r}", context=context, **kwargs)


class Base62OverflowError(Base62Error):
    """Decoded value does not fit in an unsigned 64-bit integer."""

    def __init__(self, text, **kwargs):
        context = kwargs.pop("context", {})
        context["input"] = text
        super().__init__(f"Base62 value {text!r} exceeds 64 bits", context=context, **kwargs)


class RouteKeyError(DomainKeyError):
    """Key parsing failures."""

    def __init__(self, message, key=None, **kwargs):
        context = kwargs.pop("context", {})
        if key is not None:
            context["key"] = key
        self.key = key
        super().__init__(message, context=context, **kwargs)


class InvalidSizeError(RouteKeyError):
    """Key too short or of the wrong length for the requested parse."""

    def __init__(self, key, expected, **kwargs):
        context = kwargs.pop("context", {})
        context["expected"] = expected
        context["size"] = len(key)
        super().__init__(
            f"Invalid key size {len(key)}, expected {expected}", key=key, context=context, **kwargs
        )


class InvalidBase62Error(RouteKeyError):
    """Route prefix is not valid base62."""


class KeyParseError(RouteKeyError):
    """Timestamp field is not valid base62."""


class KeyLayoutError(DomainKeyError):
    """Generated key broke its fixed-width layout. Indicates a bad bound constant."""

    def __init__(self, key, expected, **kwargs):
        context = kwargs.pop("context", {})
        context["key"] = key
        context["expected"] = expected
        super().__init__(
            f"Generated key {key!r} has length {len(key)}, expected {expected}",
            context=context,
            error_id=key,
            **kwargs,
        )
