"""Tests for the APScheduler-backed sweep timer."""

import logging
from datetime import timedelta
from unittest.mock import MagicMock

from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.interval import IntervalTrigger

from expirable.core.sweeper import SweepTimer


def test_schedule_adds_interval_job():
    """Test that schedule registers a recurring job on the scheduler."""
    scheduler = MagicMock()
    timer = SweepTimer(scheduler, job_id="sweep")
    callback = MagicMock()

    timer.schedule(callback, 120000)

    scheduler.add_job.assert_called_once()
    args, kwargs = scheduler.add_job.call_args
    assert args[0] is callback
    assert isinstance(kwargs["trigger"], IntervalTrigger)
    assert kwargs["trigger"].interval == timedelta(minutes=2)
    assert kwargs["id"] == "sweep"
    assert kwargs["max_instances"] == 1
    assert timer.active is True


def test_shared_scheduler_is_not_started():
    """Test that a caller-owned scheduler is left alone."""
    scheduler = MagicMock()
    timer = SweepTimer(scheduler)

    timer.schedule(MagicMock(), 1000)
    timer.shutdown()

    scheduler.start.assert_not_called()
    scheduler.shutdown.assert_not_called()
    assert timer.scheduler is scheduler


def test_schedule_replaces_previous_job():
    """Test rescheduling cancels the old recurrence first."""
    scheduler = MagicMock()
    first_job = MagicMock()
    scheduler.add_job.side_effect = [first_job, MagicMock()]
    timer = SweepTimer(scheduler)

    timer.schedule(MagicMock(), 1000)
    timer.schedule(MagicMock(), 2000)

    first_job.remove.assert_called_once()
    assert scheduler.add_job.call_count == 2


def test_cancel_is_idempotent():
    """Test cancelling twice removes the job once."""
    scheduler = MagicMock()
    job = scheduler.add_job.return_value
    timer = SweepTimer(scheduler)
    timer.schedule(MagicMock(), 1000)

    timer.cancel()
    timer.cancel()

    job.remove.assert_called_once()
    assert timer.active is False


def test_cancel_tolerates_missing_job():
    """Test a job already dropped by the scheduler does not raise."""
    scheduler = MagicMock()
    scheduler.add_job.return_value.remove.side_effect = JobLookupError("sweep")
    timer = SweepTimer(scheduler)
    timer.schedule(MagicMock(), 1000)

    timer.cancel()

    assert timer.active is False


def test_non_positive_interval_schedules_nothing(caplog):
    """Test a zero interval logs a warning instead of scheduling."""
    scheduler = MagicMock()
    timer = SweepTimer(scheduler)

    with caplog.at_level(logging.WARNING, logger="expirable.core.sweeper"):
        timer.schedule(MagicMock(), 0)

    scheduler.add_job.assert_not_called()
    assert timer.active is False
    assert "not positive" in caplog.text


def test_owned_scheduler_lifecycle():
    """Test the default scheduler starts lazily and shuts down."""
    timer = SweepTimer()
    assert timer.scheduler is None

    timer.schedule(MagicMock(), 60000)
    assert timer.scheduler.running is True

    timer.shutdown()
    assert timer.scheduler is None
    assert timer.active is False
