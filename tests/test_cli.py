"""Tests for the pomoladder CLI layer."""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import click.testing
import pytest

from pomoladder.cli.console import BellAudio, ConsoleScene
from pomoladder.cli.main import cli
from pomoladder.core.presentation import HIGHLIGHT_COLOR, NEUTRAL_COLOR, AudioCue


@pytest.fixture()
def runner() -> click.testing.CliRunner:
    """Return a Click CliRunner for invoking CLI commands."""
    return click.testing.CliRunner()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POMOLADDER_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# pomoladder plan
# ---------------------------------------------------------------------------


class TestPlanCommand:
    """Tests for ``pomoladder plan``."""

    def test_plan_default_count(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["plan"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 12
        assert lines[0] == "  1  small     work        01:00"
        assert lines[1] == "  2  small     break       00:30"
        assert lines[8] == "  9  pomodoro  work        25:00"

    def test_plan_shows_long_break(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["plan", "--count", "17"])
        assert result.exit_code == 0
        assert result.output.splitlines()[-1] == " 17  pomodoro  long break  20:00"

    def test_plan_rejects_zero_count(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["plan", "--count", "0"])
        assert result.exit_code != 0

    def test_plan_uses_config(self, runner: click.testing.CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "ladder.toml"
        config.write_text("[schedule]\nsmall_work = 120\n")
        result = runner.invoke(cli, ["--config", str(config), "plan", "-n", "1"])
        assert result.exit_code == 0
        assert "02:00" in result.output

    def test_invalid_config_exits_1(self, runner: click.testing.CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "ladder.toml"
        config.write_text("[schedule]\nsmall_work = 0\n")
        result = runner.invoke(cli, ["--config", str(config), "plan"])
        assert result.exit_code == 1
        assert "Invalid schedule" in result.output


# ---------------------------------------------------------------------------
# pomoladder run
# ---------------------------------------------------------------------------


class TestRunCommand:
    """Tests for ``pomoladder run`` with a patched clock."""

    @patch("pomoladder.cli.main.time")
    def test_run_stops_after_periods(
        self, mock_time: MagicMock, runner: click.testing.CliRunner
    ) -> None:
        mock_time.monotonic.side_effect = itertools.count(0.0, 1.0)
        result = runner.invoke(cli, ["run", "--speed", "100", "--periods", "2", "--seed", "1"])
        assert result.exit_code == 0
        assert "Resting" in result.output
        assert result.output.rstrip().endswith("Completed 2 periods")

    @patch("pomoladder.cli.main.time")
    def test_run_handles_interrupt(
        self, mock_time: MagicMock, runner: click.testing.CliRunner
    ) -> None:
        mock_time.monotonic.side_effect = [0.0, 1.0]
        mock_time.sleep.side_effect = [None, KeyboardInterrupt]
        result = runner.invoke(cli, ["run"])
        assert result.exit_code == 0
        assert "Working" in result.output
        assert "00:59" in result.output
        assert result.output.rstrip().endswith("Completed 0 periods")

    @pytest.mark.parametrize(
        "display", ["rotation_speed = inf", "rotation_speed = -inf", "frame_rate = nan"]
    )
    @patch("pomoladder.cli.main.time")
    def test_run_rejects_non_finite_display_values(
        self,
        mock_time: MagicMock,
        display: str,
        runner: click.testing.CliRunner,
        tmp_path: Path,
    ) -> None:
        config = tmp_path / "ladder.toml"
        config.write_text(f"[display]\n{display}\n")
        result = runner.invoke(cli, ["--config", str(config), "run", "--periods", "1"])
        assert result.exit_code == 1
        assert "must be a finite number" in result.output
        mock_time.sleep.assert_not_called()


# ---------------------------------------------------------------------------
# pomoladder --verbose
# ---------------------------------------------------------------------------


class TestVerboseFlag:
    """Tests for ``pomoladder --verbose``."""

    @patch("pomoladder.cli.main.logging.basicConfig")
    def test_verbose_enables_debug_logging(
        self, mock_basic_config: MagicMock, runner: click.testing.CliRunner
    ) -> None:
        result = runner.invoke(cli, ["--verbose", "plan", "-n", "1"])
        assert result.exit_code == 0
        mock_basic_config.assert_called_once()
        assert mock_basic_config.call_args.kwargs["level"] == logging.DEBUG

    @patch("pomoladder.cli.main.logging.basicConfig")
    def test_default_logging_is_warning(
        self, mock_basic_config: MagicMock, runner: click.testing.CliRunner
    ) -> None:
        result = runner.invoke(cli, ["plan", "-n", "1"])
        assert result.exit_code == 0
        assert mock_basic_config.call_args.kwargs["level"] == logging.WARNING


# ---------------------------------------------------------------------------
# Console widgets
# ---------------------------------------------------------------------------


class TestConsoleScene:
    """ConsoleScene folds the terminal widgets into one status line."""

    def test_line_with_progress_and_slots(self) -> None:
        scene = ConsoleScene(3)
        scene.status.set_text("Working")
        scene.clock.set_text("00:45")
        scene.progress.set_visible(True)
        scene.progress.set_fill(0.5)
        for slot, color in zip(scene.slots, (NEUTRAL_COLOR, HIGHLIGHT_COLOR, NEUTRAL_COLOR)):
            slot.set_color(color)
        assert scene.line() == "| Working    00:45 [##########----------] .*."

    def test_line_hides_progress_and_spins(self) -> None:
        scene = ConsoleScene(0)
        scene.status.set_text("Resting")
        scene.clock.set_text("00:30")
        scene.icon.set_rotation(100.0)
        assert scene.line() == "/ Resting    00:30"

    def test_bell_audio_records_cues(self) -> None:
        audio = BellAudio(enabled=False)
        audio.play(AudioCue.BREAK_START)
        assert audio.played == [AudioCue.BREAK_START]


# ---------------------------------------------------------------------------
# pomoladder --version
# ---------------------------------------------------------------------------


class TestVersionFlag:
    """Tests for ``pomoladder --version``."""

    def test_version_output(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
