import uuid

from sqlalchemy import (
    Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, JSON, Uuid,
    UniqueConstraint, Index, func
)
from sqlalchemy.orm import relationship

from .base import Base


class JobPosting(Base):
    """
    A job opening published by a placement coordinator.

    Eligibility filters:
    - min_aggregate_score gates which students may see / apply
    - eligible_batches / eligible_programs restrict the population (empty = everyone)

    Status auto-closes once the deadline has passed (see core.jobs.refresh_job_status).
    """
    __tablename__ = 'job_posting'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    coordinator_id = Column(Uuid, nullable=True)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')
    company_name = Column(Text, nullable=False)
    location = Column(Text)
    job_type = Column(Text, nullable=False, default='full-time')
    positions = Column(Integer, nullable=False, default=1)
    salary_min = Column(Float)
    salary_max = Column(Float)
    currency = Column(Text, default='INR')

    min_aggregate_score = Column(Integer, nullable=False, default=0)
    eligible_batches = Column(JSON, nullable=False, default=list)
    eligible_programs = Column(JSON, nullable=False, default=list)

    deadline = Column(TIMESTAMP(timezone=True))
    status = Column(Text, nullable=False, default='open')  # open | closed | draft
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    required_skills = relationship("JobRequiredSkill", back_populates="job", cascade="all, delete-orphan")
    applicants = relationship("JobApplicant", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_job_posting_status', 'status'),
        Index('idx_job_posting_deadline', 'deadline'),
        Index('idx_job_posting_min_aggregate', 'min_aggregate_score'),
    )


class JobRequiredSkill(Base):
    __tablename__ = 'job_required_skill'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)

    name = Column(Text, nullable=False)
    min_level = Column(Integer, nullable=False)  # 0-100

    job = relationship("JobPosting", back_populates="required_skills")


class JobApplicant(Base):
    """
    Applicant entry on a job posting, carrying the match score at apply time.

    Unique per (job, student); a second insert for the same pair fails at
    flush and surfaces as a conflict.
    """
    __tablename__ = 'job_applicant'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default='applied')  # applied|shortlisted|interviewed|selected|rejected
    match_score = Column(Integer, nullable=False, default=0)
    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    job = relationship("JobPosting", back_populates="applicants")

    __table_args__ = (
        UniqueConstraint('job_id', 'student_id', name='uq_job_applicant_job_student'),
    )


class JobApplication(Base):
    """Student-side application record, written together with JobApplicant."""
    __tablename__ = 'job_application'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default='applied')  # applied|shortlisted|rejected|selected
    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    reviewed_at = Column(TIMESTAMP(timezone=True))
    remarks = Column(Text)

    __table_args__ = (
        UniqueConstraint('job_id', 'student_id', name='uq_job_application_job_student'),
        Index('idx_job_application_student', 'student_id'),
    )
