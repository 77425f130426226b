"""
Tests for main.py - the headless game session and CLI entry point.
"""

import argparse
import json
import sys
import os

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import main, run_session


def make_params(**overrides):
    values = dict(
        grid_size=5,
        tick_ms=300,
        moves="",
        max_ticks=None,
        initial_length=1,
        seed=0,
        no_delay=True,
        quiet=True,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestRunSession:
    """Tests for run_session()."""

    def test_runs_until_wall(self):
        """Without moves the snake heads right from the center into the wall."""
        result = run_session(make_params())

        assert result["state"] == "dead"
        assert result["death_reason"] == "wall"
        assert result["ticks"] == 2
        assert result["snake"][0] == [4, 2]

    def test_scripted_moves_steer_the_snake(self):
        result = run_session(make_params(moves="D"))

        assert result["state"] == "dead"
        assert result["ticks"] == 2
        assert result["snake"][0] == [2, 4]

    def test_max_ticks_stops_game(self):
        result = run_session(make_params(grid_size=10, max_ticks=1))

        assert result["state"] == "stopped"
        assert result["ticks"] == 1
        assert result["death_reason"] is None

    def test_zero_max_ticks(self):
        result = run_session(make_params(max_ticks=0))
        assert result["state"] == "stopped"
        assert result["ticks"] == 0

    def test_frames_printed(self):
        frames = []
        run_session(make_params(grid_size=10, max_ticks=1, quiet=False), printer=frames.append)

        # Initial board plus one frame per tick
        assert len(frames) == 2
        assert "Tick 0" in frames[0]
        assert "Tick 1" in frames[1]
        assert "H" in frames[1]

    def test_summary_food_off_snake(self):
        result = run_session(make_params(grid_size=10, max_ticks=3))
        assert result["food"] not in result["snake"]


class TestMain:
    """Tests for the main() entry point."""

    def test_main_prints_summary(self, capsys):
        exit_code = main(["--grid-size", "5", "--no-delay", "--quiet", "--seed", "3"])

        assert exit_code == 0
        output = capsys.readouterr().out
        summary = json.loads(output.split("Session Summary:")[1])
        assert summary["state"] == "dead"

    def test_main_rejects_small_grid(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--grid-size", "2", "--no-delay", "--quiet"])
        assert excinfo.value.code == 2
