#!/usr/bin/env python3
"""
Job applications and the student job board.

Applying writes a JobApplication record and a JobApplicant entry on the
posting in the same unit of work. The minimum-score check at this point
uses the effective (evaluation based) score, while the job board filters
on the persisted aggregate_score.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional
import logging

from sqlalchemy.exc import IntegrityError

from database.models import JobPosting, JobApplicant, StudentProfile
from database.repositories.base import as_uuid
from database.uow import UnitOfWork
from core.config_loader import MatchingConfig
from core.eligibility.states import APPROVED
from core.exceptions import (
    StudentNotFoundException,
    JobNotFoundException,
    NotFoundException,
    InvalidStateException,
    ConflictException,
    ValidationException,
)
from core.jobs import is_job_open, refresh_job_status, close_expired_jobs
from core.scorer.effective_score import compute_effective_score
from core.scorer.match_score import score_match
from core.utils import utc_now

logger = logging.getLogger(__name__)

SHORTLISTED = 'shortlisted'
APPLICANT_STATUSES = ('applied', SHORTLISTED, 'interviewed', 'selected', 'rejected')

__all__ = ['ApplicationService', 'JobListing', 'ApplyResult', 'APPLICANT_STATUSES', 'SHORTLISTED', 'close_expired_jobs']


@dataclass
class JobListing:
    """A job as seen by one student."""
    job: JobPosting
    match_score: int
    has_applied: bool = False
    application_status: Optional[str] = None
    applied_at: Optional[datetime] = None


@dataclass
class ApplyResult:
    job_id: Any
    student_id: Any
    match_score: int
    effective_score: float


def _admits(job: JobPosting, student: StudentProfile) -> bool:
    if job.eligible_batches and student.batch not in job.eligible_batches:
        return False
    if job.eligible_programs and student.program not in job.eligible_programs:
        return False
    return True


class ApplicationService:
    def __init__(self, uow: UnitOfWork, config: Optional[MatchingConfig] = None):
        self.uow = uow
        self.config = config or MatchingConfig()

    def _approved_student(self, student_id: Any, for_update: bool = False) -> StudentProfile:
        student = self.uow.students.get_by_id(student_id, for_update=for_update)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")
        if student.placement_status != APPROVED:
            raise InvalidStateException(f"Student {student_id} is not eligible for placement opportunities yet")
        return student

    def _score(self, student: StudentProfile, job: JobPosting, now: datetime) -> int:
        return score_match(
            student,
            job,
            weights=self.config.scorer.weights,
            now=now,
            recency_window_days=self.config.scorer.recency_window_days
        ).total_score

    def apply(self, student_id: Any, job_id: Any, now: Optional[datetime] = None) -> ApplyResult:
        """Submit an application.

        Args:
            student_id: Applying student profile ID
            job_id: Job posting ID
            now: Reference time for deadline and recency checks

        Returns:
            ApplyResult with the match score stored on the applicant entry

        Raises:
            StudentNotFoundException / JobNotFoundException
            InvalidStateException: Student not approved, job not open,
                effective score below the job minimum
            ConflictException: Already applied

        Note:
            An open job found past its deadline is closed and the unit of
            work is committed before InvalidStateException is raised. Anything
            else staged in the same unit of work is committed with it, so
            callers should not batch other writes ahead of apply().
        """
        now = now or utc_now()
        student = self._approved_student(student_id, for_update=True)

        job = self.uow.jobs.get_by_id(job_id, for_update=True)
        if job is None or not job.is_active:
            raise JobNotFoundException(f"Job {job_id} not found")

        if job.status == 'open' and refresh_job_status(job, now) != 'open':
            # The closure stands even though this application is rejected.
            self.uow.commit()
        if not is_job_open(job, now):
            logger.warning(f"Student {student_id} tried to apply to job {job_id} with status '{job.status}'")
            raise InvalidStateException(f"Job {job_id} is not open for applications")

        effective = compute_effective_score(student, self.uow.evaluations.list_for_student(student.id))
        if effective < job.min_aggregate_score:
            logger.warning(
                f"Student {student_id} below minimum for job {job_id}: "
                f"effective={effective:.2f}, required={job.min_aggregate_score}"
            )
            raise InvalidStateException(
                f"Effective aggregate score {effective:.2f} does not meet the minimum of {job.min_aggregate_score}"
            )

        if student.id in self.uow.jobs.applicant_ids(job) or self.uow.jobs.get_application(job.id, student.id):
            raise ConflictException(f"Student {student_id} has already applied for job {job_id}")

        match_score = self._score(student, job, now)

        self.uow.jobs.add_application(job.id, student.id)
        self.uow.jobs.add_applicant(job, student.id, match_score)
        try:
            self.uow.flush()
        except IntegrityError as e:
            logger.warning(f"Duplicate application for job {job_id} by student {student_id}: {e.orig}")
            raise ConflictException(f"Student {student_id} has already applied for job {job_id}") from e

        logger.info(f"Student {student.id} applied to job {job.id} (match={match_score}, effective={effective:.2f})")
        return ApplyResult(job_id=job.id, student_id=student.id, match_score=match_score, effective_score=effective)

    def list_jobs_for_student(self, student_id: Any, now: Optional[datetime] = None) -> List[JobListing]:
        """Open jobs the student qualifies for on the persisted aggregate score."""
        now = now or utc_now()
        student = self._approved_student(student_id)

        jobs = [
            job for job in self.uow.jobs.list_open()
            if is_job_open(job, now)
            and (job.min_aggregate_score or 0) <= student.aggregate_score
            and _admits(job, student)
        ]

        applications = {
            app.job_id: app
            for app in self.uow.jobs.applications_for_student(student.id, [job.id for job in jobs])
        }

        listings = []
        for job in jobs:
            application = applications.get(job.id)
            listings.append(JobListing(
                job=job,
                match_score=self._score(student, job, now),
                has_applied=application is not None,
                application_status=application.status if application else None,
                applied_at=application.applied_at if application else None,
            ))

        logger.debug(f"Student {student.id} qualifies for {len(listings)} open job(s)")
        return listings

    def update_applicant_status(self, job_id: Any, student_id: Any, status: str) -> JobApplicant:
        """Coordinator moves an applicant along (shortlist, select, reject)."""
        if status not in APPLICANT_STATUSES:
            raise ValidationException(f"Invalid applicant status '{status}'; expected one of {list(APPLICANT_STATUSES)}")

        job = self.uow.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(f"Job {job_id} not found")

        applicant = self.uow.jobs.get_applicant(job.id, student_id)
        if applicant is None:
            raise NotFoundException(f"Student {student_id} has not applied for job {job_id}")

        applicant.status = status
        application = self.uow.jobs.get_application(job.id, student_id)
        if application is not None:
            application.status = status
            application.reviewed_at = utc_now()

        refresh_job_status(job)
        self.uow.flush()

        logger.info(f"Applicant {student_id} on job {job_id} is now '{status}'")
        return applicant

    def shortlist(self, job_id: Any, student_ids: List[Any], now: Optional[datetime] = None) -> List[JobApplicant]:
        """Coordinator shortlists students, typically picked from the ranking.

        Existing applicants move to 'shortlisted'. Students who never applied
        get a new applicant entry (with their current match score) and
        application record, both already shortlisted.

        Raises:
            ValidationException: No student ids given
            JobNotFoundException: Job missing or inactive
            InvalidStateException: Job not open, or a student is not
                approved for placement
            StudentNotFoundException: A student does not exist
        """
        ids = list(dict.fromkeys(as_uuid(student_id) for student_id in student_ids or []))
        if not ids:
            raise ValidationException("At least one student id is required")

        now = now or utc_now()
        job = self.uow.jobs.get_by_id(job_id, for_update=True)
        if job is None or not job.is_active:
            raise JobNotFoundException(f"Job {job_id} not found")
        if not is_job_open(job, now):
            raise InvalidStateException(f"Job {job_id} is not open for shortlisting")

        students = {student_id: self._approved_student(student_id) for student_id in ids}
        existing = {applicant.student_id: applicant for applicant in job.applicants}

        shortlisted = []
        for student_id, student in students.items():
            applicant = existing.get(student_id)
            if applicant is None:
                applicant = self.uow.jobs.add_applicant(job, student_id, self._score(student, job, now))
            applicant.status = SHORTLISTED

            application = self.uow.jobs.get_application(job.id, student_id)
            if application is None:
                application = self.uow.jobs.add_application(job.id, student_id)
            application.status = SHORTLISTED
            application.reviewed_at = now
            shortlisted.append(applicant)

        try:
            self.uow.flush()
        except IntegrityError as e:
            logger.warning(f"Concurrent application while shortlisting for job {job_id}: {e.orig}")
            raise ConflictException(f"Shortlist for job {job_id} collided with a concurrent application") from e

        logger.info(f"Shortlisted {len(shortlisted)} student(s) for job {job.id}")
        return shortlisted
