#!/usr/bin/env python3
"""
Job posting status helpers.

A posting whose deadline has passed is closed whatever its stored status
says. Readers use is_job_open; write paths call refresh_job_status so the
stored status catches up.
"""

from datetime import datetime
from typing import Any, List, Optional
import logging

from core.utils import as_utc, utc_now

logger = logging.getLogger(__name__)

JOB_OPEN = 'open'
JOB_CLOSED = 'closed'
JOB_DRAFT = 'draft'


def is_deadline_passed(job: Any, now: Optional[datetime] = None) -> bool:
    deadline = as_utc(getattr(job, 'deadline', None))
    if deadline is None:
        return False
    return deadline < (now or utc_now())


def is_job_open(job: Any, now: Optional[datetime] = None) -> bool:
    """Open status, active, and not past its deadline."""
    if getattr(job, 'status', None) != JOB_OPEN:
        return False
    if not getattr(job, 'is_active', True):
        return False
    return not is_deadline_passed(job, now)


def refresh_job_status(job: Any, now: Optional[datetime] = None) -> str:
    """Persist `closed` on an open job whose deadline has passed.

    Returns the (possibly updated) status.
    """
    if job.status == JOB_OPEN and is_deadline_passed(job, now):
        job.status = JOB_CLOSED
        logger.info(f"Job {job.id} closed: deadline {job.deadline} has passed")
    return job.status


def close_expired_jobs(uow, now: Optional[datetime] = None) -> List[Any]:
    """Close every open job past its deadline. Returns the closed jobs."""
    now = now or utc_now()
    expired = uow.jobs.list_expired_open(now)
    for job in expired:
        refresh_job_status(job, now)
    uow.flush()
    logger.info(f"Closed {len(expired)} expired job(s)")
    return expired
