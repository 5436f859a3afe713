from __future__ import annotations

import math
from collections.abc import Callable
from enum import Enum

from .clock import Clock

TICK_S = 1.0


class TimerMode(str, Enum):
    COUNTDOWN = "countdown"
    COUNT_UP = "count_up"


class SessionTimer:
    """One-second tick source for a single session.

    - Countdown (``limit_s`` set): the displayed value falls from ``limit_s``;
      reaching 0 ends the session with ``elapsed == limit_s``.
    - Count-up (``limit_s is None``): the displayed value rises until
      ``stop()``; elapsed at stop is the displayed value.

    Time is read only from the injected Clock. ``update()`` is the pump: it
    delivers every whole-second tick that has become due since the last call.
    ``on_end`` fires at most once. After ``cancel()`` nothing fires again.
    """

    def __init__(
        self,
        *,
        clock: Clock,
        limit_s: int | None,
        on_end: Callable[[int], None],
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        if limit_s is not None and limit_s <= 0:
            raise ValueError("limit_s must be > 0 or None")
        self._clock = clock
        self._limit_s = None if limit_s is None else int(limit_s)
        self._on_end = on_end
        self._on_tick = on_tick

        self._started_at_s: float | None = None
        self._ticks = 0
        self._ended = False
        self._cancelled = False

    @property
    def mode(self) -> TimerMode:
        return TimerMode.COUNT_UP if self._limit_s is None else TimerMode.COUNTDOWN

    @property
    def elapsed_s(self) -> int:
        return self._ticks

    @property
    def displayed_s(self) -> int:
        if self._limit_s is None:
            return self._ticks
        return max(0, self._limit_s - self._ticks)

    @property
    def running(self) -> bool:
        return self._started_at_s is not None and not (self._ended or self._cancelled)

    def start(self) -> None:
        if self._started_at_s is not None or self._cancelled:
            return
        self._started_at_s = self._clock.now()

    def update(self) -> None:
        if not self.running:
            return
        assert self._started_at_s is not None
        # Small epsilon so accumulated float error never drops a tick.
        due = int(math.floor((self._clock.now() - self._started_at_s) / TICK_S + 1e-9))
        while self._ticks < due and self.running:
            self._ticks += 1
            if self._on_tick is not None:
                self._on_tick(self.displayed_s)
            if self._limit_s is not None and self._limit_s - self._ticks <= 0:
                self._fire_end()

    def stop(self) -> bool:
        """Explicit stop. Only count-up timers can be stopped by the player."""

        if self._limit_s is not None or not self.running:
            return False
        self._fire_end()
        return True

    def cancel(self) -> None:
        self._cancelled = True

    def _fire_end(self) -> None:
        if self._ended:
            return
        self._ended = True
        self._on_end(self._ticks)
