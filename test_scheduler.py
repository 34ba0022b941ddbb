"""
test_scheduler.py - Idle/Running state machine and trigger coalescing.
"""

import threading
import time

import pytest

from scheduler import RefreshScheduler, SchedulerState


def blocking_job():
    """A job that parks until released, counting its runs."""
    started = threading.Event()
    release = threading.Event()
    calls = []

    def job():
        calls.append(time.monotonic())
        started.set()
        release.wait(5)

    return job, started, release, calls


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_trigger_when_idle_starts_a_run():
    job, started, release, calls = blocking_job()
    scheduler = RefreshScheduler(job, interval_seconds=3600)

    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.trigger() is True
    assert started.wait(2)
    assert scheduler.state is SchedulerState.RUNNING

    release.set()
    assert scheduler.wait_idle(2)
    assert len(calls) == 1


def test_overlapping_triggers_schedule_at_most_one_extra_run():
    job, started, release, calls = blocking_job()
    scheduler = RefreshScheduler(job, interval_seconds=3600)

    scheduler.trigger()
    assert started.wait(2)

    assert scheduler.trigger() is True    # queued
    assert scheduler.trigger() is False   # folded into the queued run
    assert scheduler.pending

    release.set()
    assert scheduler.wait_idle(5)
    assert len(calls) == 2
    assert scheduler.runs_completed == 2
    assert not scheduler.pending


def test_run_now_when_idle_runs_in_caller():
    calls = []
    scheduler = RefreshScheduler(lambda: calls.append(threading.current_thread()), interval_seconds=3600)

    outcome = scheduler.run_now()

    assert outcome.success
    assert calls == [threading.current_thread()]
    assert scheduler.state is SchedulerState.IDLE


def test_run_now_reports_job_failure():
    def job():
        raise RuntimeError("snapshot store unreachable")

    outcome = RefreshScheduler(job, interval_seconds=3600).run_now()

    assert not outcome.success
    assert "unreachable" in outcome.error


def test_failed_run_returns_to_idle():
    def job():
        raise RuntimeError("boom")

    scheduler = RefreshScheduler(job, interval_seconds=3600)
    scheduler.trigger()
    assert scheduler.wait_idle(2)
    assert scheduler.last_outcome.success is False


def test_run_now_while_running_waits_for_pending_run():
    job, started, release, calls = blocking_job()
    scheduler = RefreshScheduler(job, interval_seconds=3600)
    scheduler.trigger()
    assert started.wait(2)

    outcomes = []
    waiter = threading.Thread(target=lambda: outcomes.append(scheduler.run_now(timeout=5)))
    waiter.start()
    assert wait_until(lambda: scheduler.pending)

    release.set()
    waiter.join(5)

    assert outcomes and outcomes[0].success
    assert len(calls) == 2


def test_timer_fires_on_interval():
    calls = []
    scheduler = RefreshScheduler(lambda: calls.append(1), interval_seconds=0.05)
    scheduler.start()
    try:
        assert wait_until(lambda: scheduler.runs_completed >= 2)
    finally:
        scheduler.stop(timeout=1)
    assert len(calls) >= 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
