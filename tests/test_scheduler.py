"""Unit tests for the scheduler service.

Tests the SchedulerService including:
- Job registration with correct configuration
- Immediate first run
- Start/shutdown lifecycle
- Trigger now functionality
"""

import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from rolewatch.scheduler import SchedulerService
from rolewatch.scheduler.service import JOB_ID


class TestSchedulerService:
    """Test suite for SchedulerService."""

    def test_scheduler_initialization(self):
        """Test that scheduler initializes with correct parameters."""
        mock_callable = Mock()
        shutdown_event = threading.Event()

        scheduler = SchedulerService(
            refresh_callable=mock_callable,
            interval_seconds=600,
            shutdown_event=shutdown_event,
        )

        assert scheduler.interval_seconds == 600
        assert scheduler.refresh_callable is mock_callable
        assert scheduler.shutdown_event is shutdown_event
        assert not scheduler.is_running()
        assert scheduler.get_next_run_time() is None

    def test_scheduler_registers_job_with_correct_config(self):
        """Test that job defaults prevent overlapping and piled-up runs."""
        scheduler = SchedulerService(refresh_callable=Mock(), interval_seconds=1800)

        assert scheduler.scheduler._job_defaults["max_instances"] == 1
        assert scheduler.scheduler._job_defaults["coalesce"] is True
        assert scheduler.scheduler._job_defaults["misfire_grace_time"] == 1800

    def test_scheduler_start_and_shutdown(self):
        """Test scheduler start and shutdown lifecycle."""
        shutdown_event = threading.Event()
        scheduler = SchedulerService(
            refresh_callable=Mock(),
            interval_seconds=1800,
            shutdown_event=shutdown_event,
        )

        scheduler.start()
        assert scheduler.is_running()

        scheduler.shutdown(wait=False)
        assert not scheduler.is_running()
        assert shutdown_event.is_set()

    def test_scheduler_immediate_first_run(self):
        """Test that the first refresh runs right after start."""
        called = threading.Event()
        scheduler = SchedulerService(refresh_callable=called.set, interval_seconds=1800)

        scheduler.start()
        try:
            assert called.wait(timeout=5)
        finally:
            scheduler.shutdown(wait=True)

    def test_next_run_time_follows_interval(self):
        """Test the job is rescheduled one interval later."""
        called = threading.Event()
        scheduler = SchedulerService(refresh_callable=called.set, interval_seconds=1800)

        scheduler.start()
        try:
            called.wait(timeout=5)
            time.sleep(0.1)
            next_run = scheduler.get_next_run_time()
            assert next_run is not None
            assert next_run > datetime.now(timezone.utc) + timedelta(minutes=25)
            assert scheduler.scheduler.get_job(JOB_ID) is not None
        finally:
            scheduler.shutdown(wait=True)

    def test_shutdown_when_not_started(self):
        """Test shutdown is safe before start."""
        shutdown_event = threading.Event()
        scheduler = SchedulerService(refresh_callable=Mock(), interval_seconds=600, shutdown_event=shutdown_event)

        scheduler.shutdown()

        assert shutdown_event.is_set()

    def test_trigger_now(self):
        """Test trigger_now runs the callable synchronously."""
        mock_callable = Mock()
        scheduler = SchedulerService(refresh_callable=mock_callable, interval_seconds=600)

        scheduler.trigger_now()

        mock_callable.assert_called_once_with()
