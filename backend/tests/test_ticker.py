"""
Tests for the tick sources, including the engine on a real timer thread.
"""

import sys
import os
import threading
import time

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from snake_engine.constants import EngineState
from snake_engine.engine import SnakeEngine
from snake_engine.ticker import ManualTicker, PeriodicTicker

WAIT_SECONDS = 5


class Counter:
    def __init__(self, target=None):
        self.count = 0
        self.target = target
        self.reached = threading.Event()
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.count += 1
            if self.target is not None and self.count >= self.target:
                self.reached.set()


class TestPeriodicTicker:
    """Tests for PeriodicTicker."""

    def test_fires_repeatedly(self):
        counter = Counter(target=3)
        ticker = PeriodicTicker(10, counter)
        ticker.start()
        try:
            assert counter.reached.wait(WAIT_SECONDS)
        finally:
            ticker.stop()
        assert counter.count >= 3

    def test_no_callbacks_after_stop(self):
        counter = Counter(target=2)
        ticker = PeriodicTicker(10, counter)
        ticker.start()
        assert counter.reached.wait(WAIT_SECONDS)

        ticker.stop()
        count_at_stop = counter.count
        time.sleep(0.1)

        assert counter.count == count_at_stop
        assert ticker.running is False

    def test_stop_is_idempotent(self):
        ticker = PeriodicTicker(10, Counter())
        ticker.stop()
        ticker.start()
        ticker.stop()
        ticker.stop()
        assert ticker.running is False

    def test_restart_keeps_single_thread(self):
        counter = Counter(target=2)
        ticker = PeriodicTicker(10, counter)
        ticker.start()
        ticker.start()
        try:
            assert counter.reached.wait(WAIT_SECONDS)
            assert ticker.running is True
            ticker_threads = [t for t in threading.enumerate() if t.name == "snake-ticker"]
            assert len(ticker_threads) == 1
        finally:
            ticker.stop()

    def test_callback_may_stop_its_own_ticker(self):
        calls = []

        def callback():
            calls.append(1)
            ticker.stop()

        ticker = PeriodicTicker(10, callback)
        ticker.start()
        time.sleep(0.2)

        assert calls == [1]
        assert ticker.running is False

    def test_failing_callback_keeps_ticking(self):
        counter = Counter(target=3)

        def callback():
            counter()
            raise RuntimeError("boom")

        ticker = PeriodicTicker(10, callback)
        ticker.start()
        try:
            assert counter.reached.wait(WAIT_SECONDS)
        finally:
            ticker.stop()

    @pytest.mark.parametrize("interval", [0, -1])
    def test_invalid_interval(self, interval):
        with pytest.raises(ValueError):
            PeriodicTicker(interval, Counter())


class TestManualTicker:
    """Tests for ManualTicker."""

    def test_fires_only_while_started(self):
        counter = Counter()
        ticker = ManualTicker(100, counter)

        assert ticker.fire() == 0
        ticker.start()
        assert ticker.fire(3) == 3
        ticker.stop()
        assert ticker.fire() == 0
        assert counter.count == 3

    def test_fire_stops_when_callback_stops_ticker(self):
        def callback():
            ticker.stop()

        ticker = ManualTicker(100, callback)
        ticker.start()
        assert ticker.fire(5) == 1


class TestEngineOnTimer:
    """The engine driven by a real PeriodicTicker."""

    def test_snake_runs_into_wall(self):
        """A snake heading right from the center dies at the right wall."""
        engine = SnakeEngine(grid_size=10, tick_interval_ms=10, seed=1)
        dead = threading.Event()
        engine.add_listener(lambda: dead.set() if engine.state == EngineState.DEAD else None)

        engine.start_game()

        assert dead.wait(WAIT_SECONDS)
        assert engine.death_reason == "wall"
        assert engine.get_snake()[0] == (9, 5)
        assert engine.running is False
        assert engine.tick_count == 4

    def test_end_game_stops_ticks(self):
        engine = SnakeEngine(grid_size=30, tick_interval_ms=10, seed=1)
        counter = Counter(target=2)
        engine.add_listener(counter)

        engine.start_game()
        assert counter.reached.wait(WAIT_SECONDS)
        engine.end_game()
        ticks_at_stop = engine.tick_count
        time.sleep(0.1)

        assert engine.tick_count == ticks_at_stop
        assert engine.state == EngineState.STOPPED

    def test_restart_while_running(self):
        engine = SnakeEngine(grid_size=30, tick_interval_ms=10, seed=1)
        counter = Counter(target=2)
        engine.add_listener(counter)

        engine.start_game()
        assert counter.reached.wait(WAIT_SECONDS)
        engine.start_game()
        try:
            assert engine.state == EngineState.RUNNING
            assert engine.tick_count < 5
        finally:
            engine.end_game()
        ticker_threads = [t for t in threading.enumerate() if t.name == "snake-ticker"]
        assert ticker_threads == []
