"""
APScheduler-backed recurring timer for the active sweep.
"""

from typing import Callable, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .logging import get_logger

_LOG = get_logger(__name__)


class SweepTimer:
    """Schedule and cancel one recurring callback.

    A scheduler passed in is shared and left running on :meth:`shutdown`;
    otherwise the timer owns a daemon ``BackgroundScheduler`` created on
    first use.
    """

    def __init__(self, scheduler: Optional[BaseScheduler] = None, job_id: str = "expirable-sweep"):
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler
        self.job_id = job_id
        self._job: Optional[Job] = None

    @property
    def active(self) -> bool:
        return self._job is not None

    def _ensure_scheduler(self) -> BaseScheduler:
        if self.scheduler is None:
            self.scheduler = BackgroundScheduler(daemon=True)
        if self._owns_scheduler and not self.scheduler.running:
            self.scheduler.start()
        return self.scheduler

    def schedule(self, callback: Callable[[], None], interval_ms: float) -> None:
        self.cancel()
        if interval_ms <= 0:
            _LOG.warning(
                "sweep interval is not positive, timer not started",
                extra={"interval_ms": interval_ms},
            )
            return
        scheduler = self._ensure_scheduler()
        self._job = scheduler.add_job(
            callback,
            trigger=IntervalTrigger(seconds=interval_ms / 1000.0),
            id=self.job_id,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        _LOG.info("sweep timer started", extra={"interval_ms": interval_ms})

    def cancel(self) -> None:
        if self._job is None:
            return
        job, self._job = self._job, None
        try:
            job.remove()
        except JobLookupError:
            pass  # already gone from the job store
        _LOG.info("sweep timer stopped")

    def shutdown(self) -> None:
        self.cancel()
        if self._owns_scheduler and self.scheduler is not None:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.scheduler = None
