from __future__ import annotations

import datetime as dt
import uuid
from typing import Callable, Protocol, runtime_checkable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.job import Job
from apscheduler.schedulers.base import BaseScheduler


Callback = Callable[[], None]


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None:
        """Stop the callback from firing again. Safe to call more than once."""


@runtime_checkable
class Timer(Protocol):
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """Run callback once after delay seconds."""

    def call_every(self, period: float, callback: Callback) -> TimerHandle:
        """Run callback every period seconds, first after one period."""


class _JobHandle(TimerHandle):
    def __init__(self, job: Job) -> None:
        self._job = job

    @property
    def job_id(self) -> str:
        return self._job.id

    def cancel(self) -> None:
        try:
            self._job.remove()
        except JobLookupError:
            # one-shot jobs are dropped by the scheduler after they run
            pass


class APSchedulerTimer(Timer):
    def __init__(self, scheduler: BaseScheduler, job_prefix: str = "notifications") -> None:
        self._scheduler = scheduler
        self._job_prefix = job_prefix

    def _job_id(self, kind: str) -> str:
        return f"{self._job_prefix}-{kind}-{uuid.uuid4().hex[:8]}"

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        run_date = dt.datetime.now(dt.timezone.utc) + dt.timedelta(seconds=delay)
        job = self._scheduler.add_job(
            callback,
            "date",
            run_date=run_date,
            id=self._job_id("once"),
        )
        return _JobHandle(job)

    def call_every(self, period: float, callback: Callback) -> TimerHandle:
        job = self._scheduler.add_job(
            callback,
            "interval",
            seconds=period,
            id=self._job_id("every"),
            max_instances=1,
            coalesce=True,
        )
        return _JobHandle(job)
