"""Period core — a pure state machine for the work/break ladder.

The ladder starts with short periods and escalates: two small cycles, two
medium cycles, then full pomodoros with a long break after every fourth
one.  Nothing here touches a clock; :func:`advance` maps one period to the
next.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator


class Level(Enum):
    """Escalation tier of the ladder."""

    SMALL = "small"
    MEDIUM = "medium"
    POMODORO = "pomodoro"

    def next(self) -> Level:
        """Return the following level, saturating at POMODORO."""
        order = list(Level)
        index = order.index(self)
        return order[min(index + 1, len(order) - 1)]


class Phase(Enum):
    """Whether a period is for working or resting."""

    WORK = "work"
    BREAK = "break"


@dataclass(frozen=True)
class Schedule:
    """Duration tables (seconds) and repeat limits for each level."""

    small_work: int = 60
    small_break: int = 30
    medium_work: int = 5 * 60
    medium_break: int = 60
    pomodoro_work: int = 25 * 60
    pomodoro_break: int = 5 * 60
    long_break: int = 20 * 60
    small_repeat: int = 2
    medium_repeat: int = 2
    pomodoro_repeat: int = 4

    def __post_init__(self) -> None:
        for name in (
            "small_work",
            "small_break",
            "medium_work",
            "medium_break",
            "pomodoro_work",
            "pomodoro_break",
            "long_break",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
            if value < 1:
                raise ValueError(f"{name} must be at least 1 second, got {value}")
        for name in ("small_repeat", "medium_repeat", "pomodoro_repeat"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    def work_duration(self, level: Level) -> int:
        return {
            Level.SMALL: self.small_work,
            Level.MEDIUM: self.medium_work,
            Level.POMODORO: self.pomodoro_work,
        }[level]

    def break_duration(self, level: Level) -> int:
        return {
            Level.SMALL: self.small_break,
            Level.MEDIUM: self.medium_break,
            Level.POMODORO: self.pomodoro_break,
        }[level]

    def repeat_limit(self, level: Level) -> int:
        return {
            Level.SMALL: self.small_repeat,
            Level.MEDIUM: self.medium_repeat,
            Level.POMODORO: self.pomodoro_repeat,
        }[level]


DEFAULT_SCHEDULE = Schedule()


@dataclass(frozen=True)
class Period:
    """One contiguous work or break interval at a given level.

    ``repeat_count`` is the number of completed work+break cycles at
    ``level``.  ``long_break`` marks the extended break that follows the
    last pomodoro cycle of a round.
    """

    level: Level
    phase: Phase
    duration_seconds: int
    repeat_count: int = 0
    long_break: bool = False

    @property
    def is_work(self) -> bool:
        return self.phase == Phase.WORK


def initial_period(schedule: Schedule = DEFAULT_SCHEDULE) -> Period:
    """Return the period the ladder starts with: small work, no repeats."""
    return Period(
        level=Level.SMALL,
        phase=Phase.WORK,
        duration_seconds=schedule.work_duration(Level.SMALL),
    )


def advance(period: Period, schedule: Schedule = DEFAULT_SCHEDULE) -> Period:
    """Return the period that follows *period* once it has expired."""
    if period.phase == Phase.WORK:
        return replace(
            period,
            phase=Phase.BREAK,
            duration_seconds=schedule.break_duration(period.level),
        )

    # The repeat count was already reset before the long break started.
    if period.long_break:
        return _work(period.level, 0, schedule)

    repeat_count = period.repeat_count + 1
    level = period.level

    if level == Level.POMODORO:
        if repeat_count >= schedule.repeat_limit(level):
            return Period(
                level=level,
                phase=Phase.BREAK,
                duration_seconds=schedule.long_break,
                repeat_count=0,
                long_break=True,
            )
        return _work(level, repeat_count, schedule)

    if repeat_count >= schedule.repeat_limit(level):
        level = level.next()
        repeat_count = 0
    return _work(level, repeat_count, schedule)


def iter_periods(
    start: Period | None = None, schedule: Schedule = DEFAULT_SCHEDULE
) -> Iterator[Period]:
    """Yield the endless period sequence beginning with *start*."""
    period = start if start is not None else initial_period(schedule)
    while True:
        yield period
        period = advance(period, schedule)


def _work(level: Level, repeat_count: int, schedule: Schedule) -> Period:
    return Period(
        level=level,
        phase=Phase.WORK,
        duration_seconds=schedule.work_duration(level),
        repeat_count=repeat_count,
    )
