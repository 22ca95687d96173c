"""Timer core — a frame-driven countdown over the period ladder."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from pomoladder.core.period import (
    DEFAULT_SCHEDULE,
    Level,
    Period,
    Phase,
    Schedule,
    advance,
    initial_period,
)

_MIN_DURATION = 1.0


@dataclass(frozen=True)
class PeriodStarted:
    """Event emitted every time a new period begins."""

    phase: Phase
    level: Level
    duration_seconds: int
    long_break: bool = False


PeriodListener = Callable[[PeriodStarted], None]


def format_clock(seconds: float) -> str:
    """Format *seconds* as ``MM:SS``, rounding partial seconds up."""
    total = max(int(math.ceil(seconds)), 0)
    return f"{total // 60:02d}:{total % 60:02d}"


class PeriodTimer:
    """Countdown clock that walks the period ladder.

    The timer is polled, never scheduled: the caller feeds it elapsed
    seconds once per frame.  Remaining time is clamped at zero and a period
    only changes when :meth:`advance` is called.  Contains no I/O and no
    threads.
    """

    def __init__(
        self,
        schedule: Schedule = DEFAULT_SCHEDULE,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._schedule = schedule
        self._logger = logger or logging.getLogger(__name__)
        self._listeners: list[PeriodListener] = []
        self._period: Period = initial_period(schedule)
        self._remaining: float = 0.0
        self._duration: float = _MIN_DURATION
        self._started = False
        self._reset_clock()

    # -- public interface ----------------------------------------------------

    def subscribe(self, listener: PeriodListener) -> None:
        """Register *listener*; it is replayed the current period if started."""
        self._listeners.append(listener)
        if self._started:
            listener(self._event())

    def start(self) -> None:
        """Announce the initial period.  Calling it twice has no effect."""
        if self._started:
            return
        self._started = True
        self._announce()

    def tick(self, delta_seconds: float) -> bool:
        """Consume *delta_seconds* of elapsed time.

        Returns ``True`` once the current period has run out.
        """
        if delta_seconds < 0:
            raise ValueError(f"delta_seconds must not be negative, got {delta_seconds}")
        if self._remaining > 0.0:
            self._remaining = max(self._remaining - delta_seconds, 0.0)
            if self._remaining == 0.0:
                self._logger.debug(
                    "Period expired: level=%s phase=%s",
                    self._period.level.value,
                    self._period.phase.value,
                )
        return self.expired

    def advance(self) -> Period:
        """Move to the next period and restart the clock."""
        self._period = advance(self._period, self._schedule)
        self._reset_clock()
        self._started = True
        self._announce()
        return self._period

    def update(self, delta_seconds: float) -> None:
        """Per-frame poll: count down while time remains, otherwise advance."""
        if self._remaining > 0.0:
            self.tick(delta_seconds)
        else:
            self.advance()

    @property
    def period(self) -> Period:
        return self._period

    @property
    def remaining(self) -> float:
        return self._remaining

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def expired(self) -> bool:
        return self._remaining <= 0.0

    @property
    def fill_ratio(self) -> float:
        """Remaining fraction of the period, 1.0 at start and 0.0 at the end."""
        return min(max(self._remaining / self._duration, 0.0), 1.0)

    @property
    def minutes_elapsed(self) -> int:
        """Whole minutes that have passed since the period started."""
        return int((self._duration - self._remaining) // 60)

    def format_remaining(self) -> str:
        return format_clock(self._remaining)

    # -- private helpers -----------------------------------------------------

    def _reset_clock(self) -> None:
        seconds = float(self._period.duration_seconds)
        self._remaining = seconds
        self._duration = max(_MIN_DURATION, seconds)

    def _event(self) -> PeriodStarted:
        return PeriodStarted(
            phase=self._period.phase,
            level=self._period.level,
            duration_seconds=self._period.duration_seconds,
            long_break=self._period.long_break,
        )

    def _announce(self) -> None:
        period = self._period
        self._logger.info(
            "Period started: level=%s phase=%s duration=%ss repeat=%s%s",
            period.level.value,
            period.phase.value,
            period.duration_seconds,
            period.repeat_count,
            " (long break)" if period.long_break else "",
        )
        event = self._event()
        for listener in list(self._listeners):
            listener(event)
