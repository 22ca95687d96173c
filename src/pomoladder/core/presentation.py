"""Presentation adapter — renders a PeriodTimer onto optional collaborators.

Every collaborator is optional.  A display element that was never wired up
is skipped, so the adapter works the same with a full scene, a terminal or
nothing at all.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from pomoladder.core.period import Phase
from pomoladder.core.timer import PeriodStarted, PeriodTimer

NEUTRAL_COLOR = "#FFFFFF"
HIGHLIGHT_COLOR = "#FF6347"

DEFAULT_DECORATION_COUNT = 6
DEFAULT_ROTATION_SPEED = 90.0  # degrees per second


class AudioCue(Enum):
    """Sound played when a period starts."""

    WORK_START = "work_start"
    BREAK_START = "break_start"
    LONG_BREAK_START = "long_break_start"


class TextDisplay(Protocol):
    def set_text(self, text: str) -> None: ...


class ProgressDisplay(Protocol):
    def set_fill(self, ratio: float) -> None: ...

    def set_visible(self, visible: bool) -> None: ...


class AudioPlayer(Protocol):
    def play(self, cue: AudioCue) -> None: ...


class RotatingIcon(Protocol):
    def set_rotation(self, degrees: float) -> None: ...


class Decoration(Protocol):
    def set_color(self, color: str) -> None: ...


@dataclass(frozen=True)
class StatusLabels:
    work: str = "Working"
    rest: str = "Resting"

    def for_phase(self, phase: Phase) -> str:
        return self.work if phase == Phase.WORK else self.rest


def cue_for(event: PeriodStarted) -> AudioCue:
    """Pick the audio cue announcing *event*."""
    if event.phase == Phase.WORK:
        return AudioCue.WORK_START
    if event.long_break:
        return AudioCue.LONG_BREAK_START
    return AudioCue.BREAK_START


class HighlightSelector:
    """Keeps exactly one of a fixed set of decorations highlighted.

    The random source is injectable so tests can pin the choice.
    """

    def __init__(
        self,
        decorations: Sequence[Decoration],
        *,
        rng: Optional[random.Random] = None,
        highlight_color: str = HIGHLIGHT_COLOR,
        neutral_color: str = NEUTRAL_COLOR,
    ) -> None:
        self._decorations = list(decorations)
        self._rng = rng or random.Random()
        self._highlight_color = highlight_color
        self._neutral_color = neutral_color
        self._selected: Optional[int] = None

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    def shuffle(self) -> Optional[int]:
        """Highlight one randomly chosen slot and neutralize the others."""
        if not self._decorations:
            return None
        self._selected = self._rng.randrange(len(self._decorations))
        for index, decoration in enumerate(self._decorations):
            color = self._highlight_color if index == self._selected else self._neutral_color
            decoration.set_color(color)
        return self._selected

    def clear(self) -> None:
        """Restore every slot to the neutral color."""
        self._selected = None
        for decoration in self._decorations:
            decoration.set_color(self._neutral_color)


class PresentationAdapter:
    """Drives labels, progress, audio and decorations from a PeriodTimer.

    Audio and highlight resets react to period starts; everything else is
    redrawn on each :meth:`frame`.
    """

    def __init__(
        self,
        timer: PeriodTimer,
        *,
        status_label: Optional[TextDisplay] = None,
        time_label: Optional[TextDisplay] = None,
        progress: Optional[ProgressDisplay] = None,
        audio: Optional[AudioPlayer] = None,
        icon: Optional[RotatingIcon] = None,
        decorations: Sequence[Decoration] = (),
        labels: StatusLabels = StatusLabels(),
        rotation_speed: float = DEFAULT_ROTATION_SPEED,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._timer = timer
        self._status_label = status_label
        self._time_label = time_label
        self._progress = progress
        self._audio = audio
        self._icon = icon
        self._labels = labels
        self._rotation_speed = rotation_speed
        self._logger = logger or logging.getLogger(__name__)
        self._highlights = HighlightSelector(decorations, rng=rng)
        self._minutes_marker = 0
        self._rotation = 0.0
        timer.subscribe(self._on_period_started)

    @property
    def highlighted(self) -> Optional[int]:
        return self._highlights.selected

    @property
    def rotation(self) -> float:
        return self._rotation

    def frame(self, delta_seconds: float) -> None:
        """Advance the timer by one frame and redraw."""
        self._timer.update(delta_seconds)
        self._rotation = (self._rotation + self._rotation_speed * delta_seconds) % 360.0
        if self._timer.period.is_work:
            self._track_minutes()
        self.render()

    def render(self) -> None:
        period = self._timer.period
        if self._status_label is not None:
            self._status_label.set_text(self._labels.for_phase(period.phase))
        if self._time_label is not None:
            self._time_label.set_text(self._timer.format_remaining())
        if self._progress is not None:
            self._progress.set_visible(period.is_work)
            self._progress.set_fill(self._timer.fill_ratio)
        if self._icon is not None:
            self._icon.set_rotation(self._rotation)

    # -- event handling ------------------------------------------------------

    def _on_period_started(self, event: PeriodStarted) -> None:
        if self._audio is not None:
            self._audio.play(cue_for(event))
        if event.phase == Phase.WORK:
            self._minutes_marker = 0
        else:
            self._highlights.clear()
        self.render()

    def _track_minutes(self) -> None:
        minutes = self._timer.minutes_elapsed
        while self._minutes_marker < minutes:
            self._minutes_marker += 1
            selected = self._highlights.shuffle()
            self._logger.debug(
                "Minute %s elapsed, highlighting slot %s", self._minutes_marker, selected
            )
