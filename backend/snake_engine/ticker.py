"""
Tick sources that drive the engine.

PeriodicTicker runs a schedule.Scheduler run_pending loop on a daemon
thread, with a fresh scheduler per run and a stop event so it can be
cancelled. ManualTicker has the same interface and is fired explicitly by
a fixed-step game loop.
"""

import logging
import threading
from typing import Callable, Optional

import schedule

logger = logging.getLogger(__name__)

MAX_POLL_SECONDS = 0.01


class PeriodicTicker:
    """
    Owned, cancellable periodic tick source.

    start() restarts cleanly if the ticker is already running. After stop()
    returns the callback is never invoked again.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None]):
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._callback = callback
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    def start(self) -> None:
        self.stop()

        stop_event = threading.Event()
        scheduler = schedule.Scheduler()
        scheduler.every(self.interval_ms / 1000.0).seconds.do(self._fire, stop_event)
        thread = threading.Thread(
            target=self._run,
            args=(scheduler, stop_event),
            name="snake-ticker",
            daemon=True,
        )
        with self._lock:
            self._stop_event = stop_event
            self._thread = thread
        thread.start()
        logger.debug("Ticker started (interval=%sms)", self.interval_ms)

    def stop(self) -> None:
        with self._lock:
            stop_event, thread = self._stop_event, self._thread
            if stop_event is None or stop_event.is_set():
                return
            stop_event.set()

        # The callback may stop its own ticker; a thread cannot join itself
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug("Ticker stopped")

    def _run(self, scheduler: schedule.Scheduler, stop_event: threading.Event) -> None:
        poll = min(MAX_POLL_SECONDS, self.interval_ms / 10000.0)
        while not stop_event.is_set():
            scheduler.run_pending()
            stop_event.wait(poll)
        scheduler.clear()

    def _fire(self, stop_event: threading.Event) -> None:
        if stop_event.is_set():
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Tick callback failed")


class ManualTicker:
    """
    Tick source fired by hand.

    fire() invokes the callback only while started, which mirrors the
    no-callback-after-stop guarantee of PeriodicTicker.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None]):
        self.interval_ms = interval_ms
        self._callback = callback
        self.running = False
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        self.running = True
        self.starts += 1

    def stop(self) -> None:
        if self.running:
            self.running = False
            self.stops += 1

    def fire(self, times: int = 1) -> int:
        """Invoke the callback up to `times` times; returns how many fired."""
        fired = 0
        for _ in range(times):
            if not self.running:
                break
            self._callback()
            fired += 1
        return fired
