# advisor_booking/tasks/reminder_scheduler.py
"""
In-process reminder scheduler.

A ``ReminderScheduler`` owns one daemon thread that waits until the next
scheduled run, executes the reminder cycle, and re-arms. State is
{stopped, running}; ``run_now`` executes a cycle immediately without
touching that state. Cycles never overlap: timed and manual runs share a
lock.

Time comes from an injected ``Clock``. Tests drive ``run_pending`` with a
``FixedClock`` instead of starting the thread.
"""

from datetime import datetime, timedelta
import logging
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

from ..core.time_window import Clock, SystemClock
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Upper bound on one wait so clock adjustments are noticed promptly.
MAX_WAIT_SECONDS = 30.0


class ReminderScheduler:
    def __init__(
        self,
        process_fn: Callable[[], Any],
        *,
        interval: timedelta = timedelta(minutes=5),
        clock: Optional[Clock] = None,
        name: str = "reminder-scheduler",
    ):
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        self._process_fn = process_fn
        self._interval = interval
        self._clock = clock or SystemClock()
        self._name = name

        self._state_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._next_run: Optional[datetime] = None
        self._last_run: Optional[datetime] = None
        self._last_result: Any = None

    @property
    def is_running(self) -> bool:
        with self._state_lock:
            return self._running

    @property
    def next_scheduled_run(self) -> Optional[datetime]:
        with self._state_lock:
            return self._next_run if self._running else None

    def start(self, *, spawn_thread: bool = True) -> bool:
        """
        Arm the timer. Returns False (and logs) when already running.

        ``spawn_thread=False`` arms the schedule without a worker thread;
        the caller is then responsible for calling ``run_pending``.
        """
        with self._state_lock:
            if self._running:
                logger.info("Reminder scheduler already running; start ignored")
                return False
            self._running = True
            self._next_run = self._clock.now() + self._interval
            self._stop_event = threading.Event()
            if spawn_thread:
                self._thread = threading.Thread(
                    target=self._loop, args=(self._stop_event,), name=self._name, daemon=True
                )
                self._thread.start()
            next_run = self._next_run

        prometheus_metrics.set_scheduler_running(True)
        logger.info(
            "Reminder scheduler started (every %s); next run at %s", self._interval, next_run
        )
        return True

    def stop(self, timeout: Optional[float] = 5.0) -> bool:
        """Disarm the timer. Returns False (no-op) when already stopped."""
        with self._state_lock:
            if not self._running:
                logger.info("Reminder scheduler already stopped; stop ignored")
                return False
            self._running = False
            self._next_run = None
            self._stop_event.set()
            thread, self._thread = self._thread, None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        prometheus_metrics.set_scheduler_running(False)
        logger.info("Reminder scheduler stopped")
        return True

    def status(self) -> Dict[str, Any]:
        with self._state_lock:
            return {
                "is_running": self._running,
                "next_scheduled_run": self._next_run.isoformat() if self._next_run else None,
                "interval_seconds": int(self._interval.total_seconds()),
                "last_run": self._last_run.isoformat() if self._last_run else None,
            }

    def run_now(self) -> Any:
        """Run one reminder cycle immediately; scheduling state is left unchanged."""
        logger.info("Manual reminder run requested")
        return self._execute()

    def run_pending(self) -> bool:
        """Run a cycle if the scheduler is armed and the next run is due."""
        with self._state_lock:
            due = self._running and self._next_run is not None and self._clock.now() >= self._next_run
            if due:
                self._next_run = self._clock.now() + self._interval
        if not due:
            return False
        try:
            self._execute()
        except Exception:
            logger.exception("Scheduled reminder run failed")
        return True

    @property
    def last_result(self) -> Any:
        return self._last_result

    def _execute(self) -> Any:
        with self._run_lock:
            result = self._process_fn()
            with self._state_lock:
                self._last_run = self._clock.now()
                self._last_result = result
            return result

    def _seconds_until_next_run(self) -> float:
        with self._state_lock:
            if self._next_run is None:
                return MAX_WAIT_SECONDS
            remaining = (self._next_run - self._clock.now()).total_seconds()
        return min(max(remaining, 0.0), MAX_WAIT_SECONDS)

    def _loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._seconds_until_next_run()):
            self.run_pending()
        logger.debug("Reminder scheduler thread exiting")
