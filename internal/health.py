"""Readiness checks for the key service: event loop, host clock, key generator."""

import asyncio
import time
from enum import Enum

from keys.routing import ROUTE_KEY_SIZE, RouteKey
from utils.timestamp import ClockError, format_timestamp, now_micros

# 2020-01-01T00:00:00Z
MIN_SANE_MICROS = 1_577_836_800_000_000


class Status(Enum):
    OK = "healthy"
    DEGRADED = "degraded"
    FAIL = "unhealthy"


_SEVERITY = [Status.OK, Status.DEGRADED, Status.FAIL]


class CheckResult:
    __slots__ = ("name", "status", "msg", "critical")

    def __init__(self, name, status, msg=""):
        self.name = name
        self.status = status
        self.msg = msg
        self.critical = True

    @property
    def impact(self):
        """Status this result contributes to the report."""
        if self.status is Status.FAIL and not self.critical:
            return Status.DEGRADED
        return self.status

    def to_dict(self):
        return {"name": self.name, "status": self.status.value, "critical": self.critical, "msg": self.msg}


class HealthReport:
    __slots__ = ("checks", "uptime", "timestamp")

    def __init__(self, checks, uptime):
        self.checks = checks
        self.uptime = uptime
        try:
            self.timestamp = format_timestamp()
        except ClockError:
            self.timestamp = None

    @property
    def status(self):
        return max((check.impact for check in self.checks), key=_SEVERITY.index, default=Status.OK)

    def to_dict(self):
        return {"status": self.status.value,
                "timestamp": self.timestamp,
                "uptime_s": round(self.uptime, 1),
                "checks": [check.to_dict() for check in self.checks]}


class HealthChecker:
    """Runs every registered check on each call; the checks are all in-process and cheap."""

    def __init__(self):
        self._checks = {}
        self._started = time.monotonic()

    @property
    def uptime(self):
        return time.monotonic() - self._started

    def register(self, name, check_fn, critical=True):
        self._checks[name] = (check_fn, critical)

    async def check(self):
        results = []
        for name, (check_fn, critical) in self._checks.items():
            try:
                result = await check_fn()
            except Exception as exc:
                result = CheckResult(name, Status.FAIL, str(exc))
            result.critical = critical
            results.append(result)
        return HealthReport(results, self.uptime)


async def check_event_loop():
    await asyncio.sleep(0)
    return CheckResult("loop", Status.OK)


async def check_clock():
    micros = now_micros()
    if micros < MIN_SANE_MICROS:
        return CheckResult("clock", Status.DEGRADED, f"behind@{micros}")
    return CheckResult("clock", Status.OK)


def create_keygen_check(generator=RouteKey):
    async def check():
        started = now_micros()
        key = generator.create()

        if len(key) != ROUTE_KEY_SIZE:
            return CheckResult("keygen", Status.FAIL, f"size{len(key)}")

        if generator.parse_timestamp(key) < started:
            return CheckResult("keygen", Status.DEGRADED, "stale_timestamp")

        return CheckResult("keygen", Status.OK, key)
    return check
