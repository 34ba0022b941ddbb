"""
scheduler.py - Refresh scheduler

    IDLE --trigger--> RUNNING --done, nothing pending--> IDLE
                      RUNNING --done, pending--> RUNNING (one more run)

Triggers that arrive while a refresh is running collapse into a single
pending run, so at most one refresh ever writes the snapshot at a time.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import config
from logger import setup_logger

logger = setup_logger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class RefreshOutcome:
    success: bool
    error: Optional[str] = None


class RefreshScheduler:
    def __init__(self, job: Callable[[], object], interval_seconds: float = config.REFRESH_INTERVAL_SECONDS):
        self._job = job
        self.interval_seconds = interval_seconds

        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)
        self._state = SchedulerState.IDLE
        self._pending = False
        self._completed = 0
        self._last_outcome: Optional[RefreshOutcome] = None

        self._stop = threading.Event()
        self._timer: Optional[threading.Thread] = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def runs_completed(self) -> int:
        return self._completed

    @property
    def last_outcome(self) -> Optional[RefreshOutcome]:
        return self._last_outcome

    def trigger(self) -> bool:
        """
        Fire-and-forget refresh request.

        Returns True when a run was started or queued, False when the request
        folded into a run that was already pending.
        """
        with self._lock:
            if self._state is SchedulerState.RUNNING:
                if self._pending:
                    logger.info("Refresh already pending, trigger coalesced", extra={"event": "trigger_coalesced"})
                    return False
                self._pending = True
                logger.info("Refresh running, queued one more", extra={"event": "trigger_queued"})
                return True
            self._state = SchedulerState.RUNNING

        threading.Thread(target=self._drain, name="refresh", daemon=True).start()
        return True

    def run_now(self, timeout: Optional[float] = None) -> RefreshOutcome:
        """
        On-demand refresh that waits for a run covering this request.

        When idle the run happens in the calling thread. When busy the request
        rides on the pending run and this call waits for it to finish.
        """
        with self._lock:
            if self._state is SchedulerState.RUNNING:
                self._pending = True
                # the in-flight run finishes first, then the pending one
                target = self._completed + 2
                if not self._settled.wait_for(lambda: self._completed >= target, timeout):
                    return RefreshOutcome(False, "Timed out waiting for refresh")
                return self._last_outcome
            self._state = SchedulerState.RUNNING

        outcome, again = self._run_cycle()
        if again:
            threading.Thread(target=self._drain, name="refresh", daemon=True).start()
        return outcome

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        with self._lock:
            return self._settled.wait_for(lambda: self._state is SchedulerState.IDLE, timeout)

    def start(self):
        """Start the interval timer. The first tick fires one interval from now."""
        if self._timer and self._timer.is_alive():
            return
        self._stop.clear()
        self._timer = threading.Thread(target=self._tick_loop, name="refresh-timer", daemon=True)
        self._timer.start()
        logger.info(f"Refresh timer started, every {self.interval_seconds}s", extra={"event": "timer_started"})

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._timer:
            self._timer.join(timeout)
            self._timer = None

    def _tick_loop(self):
        while not self._stop.wait(self.interval_seconds):
            logger.info("Scheduled refresh", extra={"event": "timer_tick"})
            self.trigger()

    def _drain(self):
        again = True
        while again:
            _, again = self._run_cycle()

    def _run_cycle(self):
        """Run the job once. Caller must have moved the state to RUNNING."""
        outcome = self._execute()
        with self._lock:
            self._completed += 1
            self._last_outcome = outcome
            again = self._pending
            self._pending = False
            if not again:
                self._state = SchedulerState.IDLE
            self._settled.notify_all()
        return outcome, again

    def _execute(self) -> RefreshOutcome:
        try:
            self._job()
        except Exception as e:
            logger.error(f"Refresh failed: {e}", extra={"event": "refresh_failed", "error": str(e)}, exc_info=True)
            return RefreshOutcome(False, str(e))
        return RefreshOutcome(True)
