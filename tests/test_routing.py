"""Unit tests for routing keys."""

import pytest

from core.errors import (
    InvalidBase62Error,
    InvalidCharacterError,
    InvalidSizeError,
    KeyLayoutError,
    KeyParseError,
    RouteKeyError,
)
from keys import routing
from keys.routing import RouteKey
from utils import base62
from utils.timestamp import now_micros


class TestCreate:
    """Tests for RouteKey.create."""

    def test_key_length(self):
        """Keys are always 16 chars."""
        for _ in range(100):
            assert len(RouteKey.create()) == routing.ROUTE_KEY_SIZE

    def test_key_alphabet(self):
        """Keys only use base62 symbols."""
        key = RouteKey.create()
        assert set(key) <= set(base62.BASE62)

    def test_keys_unique(self):
        """10,000 keys in a row are distinct."""
        keys = [RouteKey.create() for _ in range(10_000)]
        assert len(set(keys)) == 10_000

    def test_layout(self, frozen_clock, fixed_random, known_key):
        """Timestamp is inserted into the random field at offset 4."""
        fixed_random(base62.decode("YM6ITCr") - routing.MIN_RANDOM)
        assert RouteKey.create() == known_key

    def test_smallest_random_field(self, frozen_clock, fixed_random):
        """The lowest random value still pads to 7 chars."""
        fixed_random(0)
        key = RouteKey.create()
        assert key == "0010" + "7clU96YvD" + "000"

    def test_largest_random_field(self, frozen_clock, fixed_random):
        """The highest random value is "zzzzzzz"."""
        fixed_random(routing.MAX_RANDOM - routing.MIN_RANDOM)
        key = RouteKey.create()
        assert key == "zzzz" + "7clU96YvD" + "zzz"

    def test_random_field_bounds(self):
        """Random field bounds encode to 5 and 7 chars."""
        assert base62.encode(routing.MIN_RANDOM) == "10000"
        assert base62.encode(routing.MAX_RANDOM) == "zzzzzzz"

    def test_random_field_width(self):
        """random_field is always 7 chars."""
        for _ in range(100):
            assert len(routing.random_field()) == routing.RANDOM_FIELD_SIZE

    def test_timestamp_outside_layout(self, monkeypatch):
        """A timestamp that no longer fits 9 chars is a layout error."""
        monkeypatch.setattr("keys.routing.now_nanos", lambda: base62.RADIX**9 * 1_000)
        with pytest.raises(KeyLayoutError) as info:
            RouteKey.create()
        assert len(info.value.context["key"]) == 17
        assert info.value.error_id == info.value.context["key"]

    def test_embeds_current_time(self):
        """Fresh keys carry a timestamp no earlier than the test start."""
        started = now_micros()
        key = RouteKey.create()
        assert RouteKey.parse_timestamp(key) >= started


class TestParseRoute:
    """Tests for RouteKey.parse_route."""

    def test_known_key(self, known_key):
        """YM... with 25 routes is route 5."""
        assert RouteKey.parse_route(known_key, 25) == 5

    def test_single_route(self):
        """One route always maps to 0."""
        for _ in range(50):
            assert RouteKey.parse_route(RouteKey.create(), 1) == 0

    def test_round_robin(self):
        """Prefixes in encoded order cycle through the routes."""
        prefixes = [base62.encode(n, width=2) for n in range(base62.RADIX**2)]
        assert prefixes == sorted(prefixes)
        routes = [RouteKey.parse_route(prefix, 10) for prefix in prefixes]
        assert routes == [n % 10 for n in range(3844)]

    def test_route_in_range(self):
        """Routes fall in [0, total_routes)."""
        for total in (2, 7, 64, 128):
            for _ in range(20):
                assert 0 <= RouteKey.parse_route(RouteKey.create(), total) < total

    def test_clamps_high(self):
        """More than 128 routes behaves like 128."""
        for n in range(0, 3844, 37):
            prefix = base62.encode(n, width=2)
            assert RouteKey.parse_route(prefix, 200) == RouteKey.parse_route(prefix, 128)

    def test_clamps_low(self, known_key):
        """Zero or negative routes behave like 1."""
        assert RouteKey.parse_route(known_key, 0) == 0
        assert RouteKey.parse_route(known_key, -5) == 0

    def test_rejects_non_int_routes(self):
        """Float route counts raise TypeError."""
        with pytest.raises(TypeError):
            RouteKey.parse_route("YM", 2.5)
        with pytest.raises(TypeError):
            routing.clamp_routes("25")

    def test_route_is_int(self, known_key):
        """Routes come back as plain ints."""
        assert type(RouteKey.parse_route(known_key, 25)) is int

    def test_clamp_routes(self):
        """clamp_routes bounds to [1, 128]."""
        assert routing.clamp_routes(0) == 1
        assert routing.clamp_routes(1) == 1
        assert routing.clamp_routes(50) == 50
        assert routing.clamp_routes(128) == 128
        assert routing.clamp_routes(255) == 128

    def test_only_prefix_matters(self):
        """The rest of the key is not looked at."""
        assert RouteKey.parse_route("YM", 25) == 5
        assert RouteKey.parse_route("YM~~", 25) == 5

    def test_empty_key(self):
        """Empty keys raise InvalidSizeError."""
        with pytest.raises(InvalidSizeError):
            RouteKey.parse_route("", 1)

    def test_one_char_key(self):
        """Single char keys raise InvalidSizeError."""
        with pytest.raises(InvalidSizeError) as info:
            RouteKey.parse_route("A", 10)
        assert info.value.context["size"] == 1

    def test_invalid_prefix(self):
        """Non base62 prefixes raise InvalidBase62Error wrapping the codec error."""
        with pytest.raises(InvalidBase62Error) as info:
            RouteKey.parse_route("~A7clU96YvDTCrzz", 10)
        assert isinstance(info.value.cause, InvalidCharacterError)
        assert info.value.key == "~A7clU96YvDTCrzz"
        assert isinstance(info.value, RouteKeyError)


class TestParseTimestamp:
    """Tests for RouteKey.parse_timestamp."""

    def test_known_key(self, known_key, known_micros):
        """Known key carries a known timestamp."""
        assert RouteKey.parse_timestamp(known_key) == known_micros

    def test_wrong_length(self):
        """Keys that are not 16 chars raise InvalidSizeError."""
        for key in ("", "sxxskw", "YM6I7clU96YvDTC", "YM6I7clU96YvDTCrr"):
            with pytest.raises(InvalidSizeError):
                RouteKey.parse_timestamp(key)

    def test_invalid_timestamp_field(self):
        """Non base62 timestamp fields raise KeyParseError."""
        with pytest.raises(KeyParseError) as info:
            RouteKey.parse_timestamp("YM6I7cl~96YvDTCr")
        assert isinstance(info.value.cause, InvalidCharacterError)

    def test_random_chars_ignored(self, known_micros):
        """Only chars 4..13 are decoded."""
        assert RouteKey.parse_timestamp("~~~~7clU96YvD~~~") == known_micros

    def test_parse_together(self, known_key, known_micros):
        """parse returns route and timestamp."""
        info = RouteKey.parse(known_key, 25)
        assert info.to_dict() == {
            "key": known_key,
            "route": 5,
            "routes": 25,
            "timestamp_us": known_micros,
        }

    def test_parse_clamps_reported_routes(self, known_key):
        """parse reports the clamped route count."""
        assert RouteKey.parse(known_key, 500).routes == 128
