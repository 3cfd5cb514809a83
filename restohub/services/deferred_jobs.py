"""Durable delayed jobs and the background sweeper that runs them."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from restohub.models.deferred_job import ORDER_AUTO_COMPLETE, DeferredJob
from restohub.services.order_status import auto_complete_pending

logger = logging.getLogger(__name__)


def schedule_auto_complete(db: Session, sale_id: int, delay_seconds: int, now: datetime | None = None) -> DeferredJob:
    """Queue a Pending -> Completed flip; committed together with the order."""
    now = now or datetime.now(timezone.utc)
    job = DeferredJob(
        job_type=ORDER_AUTO_COMPLETE,
        sale_id=sale_id,
        run_after=now + timedelta(seconds=delay_seconds),
    )
    db.add(job)
    return job


def run_due_jobs(db: Session, now: datetime | None = None) -> int:
    """Execute every job whose ``run_after`` has passed. Returns the count run."""
    now = now or datetime.now(timezone.utc)
    jobs = db.scalars(
        select(DeferredJob)
        .where(DeferredJob.executed_at.is_(None), DeferredJob.run_after <= now)
        .order_by(DeferredJob.run_after.asc(), DeferredJob.id.asc())
    ).all()

    for job in jobs:
        if job.job_type == ORDER_AUTO_COMPLETE and job.sale_id is not None:
            if auto_complete_pending(db, job.sale_id, now=now):
                logger.info("[JOBS] Order %s auto-completed", job.sale_id)
        else:
            logger.warning("[JOBS] Unknown job type %s (job_id=%s); marking executed.", job.job_type, job.id)
        job.executed_at = now

    if jobs:
        db.commit()
    return len(jobs)


class DeferredJobSweeper:
    """Daemon thread that polls for due jobs at a fixed interval."""

    def __init__(self, session_factory: Callable[[], Session], interval_seconds: float) -> None:
        self._session_factory = session_factory
        self._interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def sweep_once(self) -> int:
        with self._session_factory() as db:
            try:
                return run_due_jobs(db)
            except Exception:
                db.rollback()
                logger.exception("[JOBS] Deferred job sweep failed")
                return 0

    def _run(self) -> None:
        while not self._stop.wait(self._interval_seconds):
            self.sweep_once()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="deferred-job-sweeper", daemon=True)
        self._thread.start()
        logger.info("[JOBS] Sweeper started (interval=%ss)", self._interval_seconds)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval_seconds + 1)
            self._thread = None
