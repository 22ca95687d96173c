"""Terminal stand-ins for the presentation collaborators.

Each widget only records what it was told; :class:`ConsoleScene` folds the
recorded state into one status line.
"""

from __future__ import annotations

import logging

import click

from pomoladder.core.presentation import HIGHLIGHT_COLOR, AudioCue

_SPINNER = "|/-\\"
_BAR_WIDTH = 20

logger = logging.getLogger(__name__)


class TextWidget:
    def __init__(self) -> None:
        self.text = ""

    def set_text(self, text: str) -> None:
        self.text = text


class ProgressWidget:
    def __init__(self) -> None:
        self.fill = 0.0
        self.visible = False

    def set_fill(self, ratio: float) -> None:
        self.fill = ratio

    def set_visible(self, visible: bool) -> None:
        self.visible = visible


class IconWidget:
    def __init__(self) -> None:
        self.degrees = 0.0

    def set_rotation(self, degrees: float) -> None:
        self.degrees = degrees


class SlotWidget:
    def __init__(self) -> None:
        self.color = ""

    def set_color(self, color: str) -> None:
        self.color = color


class BellAudio:
    """Rings the terminal bell for every cue."""

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self.played: list[AudioCue] = []

    def play(self, cue: AudioCue) -> None:
        self.played.append(cue)
        logger.debug("Audio cue: %s", cue.value)
        if self._enabled:
            click.echo("\a", nl=False)


class ConsoleScene:
    """All terminal widgets of one running timer."""

    def __init__(self, decoration_count: int) -> None:
        self.status = TextWidget()
        self.clock = TextWidget()
        self.progress = ProgressWidget()
        self.icon = IconWidget()
        self.slots = [SlotWidget() for _ in range(decoration_count)]

    def line(self) -> str:
        spinner = _SPINNER[int(self.icon.degrees // 90) % len(_SPINNER)]
        parts = [spinner, f"{self.status.text:<10}", self.clock.text]
        if self.progress.visible:
            filled = round(self.progress.fill * _BAR_WIDTH)
            parts.append("[" + "#" * filled + "-" * (_BAR_WIDTH - filled) + "]")
        if self.slots:
            parts.append(
                "".join("*" if slot.color == HIGHLIGHT_COLOR else "." for slot in self.slots)
            )
        return " ".join(parts)
