import logging
from datetime import datetime
from typing import List, Optional, Any, Set

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from database.models import JobPosting, JobApplicant, JobApplication
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class JobRepository(BaseRepository):
    def get_by_id(self, job_id: Any, for_update: bool = False) -> Optional[JobPosting]:
        stmt = (
            select(JobPosting)
            .where(JobPosting.id == as_uuid(job_id))
            .options(selectinload(JobPosting.required_skills), selectinload(JobPosting.applicants))
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def list_open(self) -> List[JobPosting]:
        stmt = (
            select(JobPosting)
            .where(JobPosting.status == 'open', JobPosting.is_active.is_(True))
            .options(selectinload(JobPosting.required_skills))
            .order_by(JobPosting.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_expired_open(self, now: datetime) -> List[JobPosting]:
        stmt = select(JobPosting).where(
            JobPosting.status == 'open',
            JobPosting.deadline.is_not(None),
            JobPosting.deadline < now
        )
        return list(self.db.execute(stmt).scalars().all())

    def add(self, job: JobPosting) -> JobPosting:
        self.db.add(job)
        return job

    def applicant_ids(self, job: JobPosting) -> Set[Any]:
        return {applicant.student_id for applicant in job.applicants}

    def get_applicant(self, job_id: Any, student_id: Any) -> Optional[JobApplicant]:
        stmt = select(JobApplicant).where(
            JobApplicant.job_id == as_uuid(job_id),
            JobApplicant.student_id == as_uuid(student_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_applicant(self, job: JobPosting, student_id: Any, match_score: int) -> JobApplicant:
        applicant = JobApplicant(job_id=job.id, student_id=as_uuid(student_id), match_score=match_score)
        job.applicants.append(applicant)
        return applicant

    def get_application(self, job_id: Any, student_id: Any) -> Optional[JobApplication]:
        stmt = select(JobApplication).where(
            JobApplication.job_id == as_uuid(job_id),
            JobApplication.student_id == as_uuid(student_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_application(self, job_id: Any, student_id: Any) -> JobApplication:
        application = JobApplication(job_id=as_uuid(job_id), student_id=as_uuid(student_id), status='applied')
        self.db.add(application)
        return application

    def applications_for_student(self, student_id: Any, job_ids: List[Any]) -> List[JobApplication]:
        if not job_ids:
            return []
        stmt = select(JobApplication).where(
            JobApplication.student_id == as_uuid(student_id),
            JobApplication.job_id.in_([as_uuid(j) for j in job_ids])
        )
        return list(self.db.execute(stmt).scalars().all())
