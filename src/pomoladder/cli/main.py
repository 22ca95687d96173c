"""CLI entry point for pomoladder.

Uses Click to expose the ``pomoladder`` command group with subcommands
that print the period ladder or run it in the terminal.
"""

from __future__ import annotations

import itertools
import logging
import random
import sys
import time
from typing import Callable, Optional, TypeVar

import click

import pomoladder
from pomoladder.cli.console import BellAudio, ConsoleScene
from pomoladder.config import ConfigurationError, Settings, load_settings
from pomoladder.core.period import Period, iter_periods
from pomoladder.core.presentation import PresentationAdapter, StatusLabels
from pomoladder.core.timer import PeriodStarted, PeriodTimer, format_clock

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``ConfigurationError`` to a CLI error.

    On ``ConfigurationError`` the message is printed to stderr and the
    process exits with code 1.
    """
    try:
        return action()
    except ConfigurationError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _describe(period: Period) -> str:
    if period.long_break:
        return "long break"
    return period.phase.value


@click.group()
@click.version_option(version=pomoladder.__version__, prog_name="pomoladder")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="TOML configuration file (defaults to $POMOLADDER_CONFIG).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str]) -> None:
    """pomoladder: an escalating Pomodoro ladder timer."""
    setup_logging(verbose)
    ctx.obj = _run(lambda: load_settings(config_path))


@cli.command()
@click.option("--count", "-n", type=click.IntRange(min=1), default=12, show_default=True)
@click.pass_obj
def plan(settings: Settings, count: int) -> None:
    """Print the first COUNT periods of the ladder."""
    periods = itertools.islice(iter_periods(schedule=settings.schedule), count)
    for index, period in enumerate(periods, start=1):
        click.echo(
            f"{index:>3}  {period.level.value:<8}  {_describe(period):<10}  "
            f"{format_clock(period.duration_seconds)}"
        )


@cli.command()
@click.option(
    "--speed",
    type=click.FloatRange(min=0.0, min_open=True),
    default=1.0,
    show_default=True,
    help="Multiplier applied to elapsed time.",
)
@click.option(
    "--periods",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many periods (runs until Ctrl-C otherwise).",
)
@click.option("--seed", type=int, default=None, help="Seed for the highlight selection.")
@click.pass_obj
def run(settings: Settings, speed: float, periods: Optional[int], seed: Optional[int]) -> None:
    """Run the ladder timer in the terminal."""
    display = settings.display
    timer = PeriodTimer(settings.schedule)
    scene = ConsoleScene(display.decoration_count)
    adapter = PresentationAdapter(
        timer,
        status_label=scene.status,
        time_label=scene.clock,
        progress=scene.progress,
        audio=BellAudio(display.bell),
        icon=scene.icon,
        decorations=scene.slots,
        labels=StatusLabels(work=display.work_label, rest=display.break_label),
        rotation_speed=display.rotation_speed,
        rng=random.Random(seed),
    )

    started: list[PeriodStarted] = []
    timer.subscribe(started.append)
    timer.start()

    interval = 1.0 / display.frame_rate
    last = time.monotonic()
    try:
        while periods is None or len(started) <= periods:
            time.sleep(interval)
            now = time.monotonic()
            adapter.frame((now - last) * speed)
            last = now
            click.echo("\r" + scene.line(), nl=False)
    except KeyboardInterrupt:
        logger.debug("Interrupted by user")
    click.echo()
    completed = len(started) - 1
    click.echo(f"Completed {completed} period{'s' if completed != 1 else ''}")
