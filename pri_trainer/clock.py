from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic clock abstraction.

    Session timing, feedback delays and response times all read time through
    this interface so tests can drive them with a fake clock.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


def wall_time_ms() -> int:
    """Epoch milliseconds, used only to timestamp persisted summaries."""

    return int(time.time() * 1000)
