import uuid

from sqlalchemy import (
    Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, JSON, Uuid, Index, func
)
from sqlalchemy.orm import relationship

from .base import Base


class StudentProfile(Base):
    """
    A student's placement profile.

    Holds the raw scoring inputs (skills, tests, trainer remarks) together
    with the derived fields that gate placement:
    - aggregate_score: persisted 0-100 composite of tests and remarks
    - placement_eligible: True only for approved/placed students

    The derived fields are written by core.scorer.aggregate.apply_aggregate_score
    and nowhere else.
    """
    __tablename__ = 'student_profile'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, unique=True, default=uuid.uuid4)
    roll_no = Column(Text, nullable=False, unique=True)
    full_name = Column(Text)

    trainer_id = Column(Uuid, nullable=True)
    approval_status = Column(Text, nullable=False, default='pending')

    program = Column(Text, nullable=False)
    batch = Column(Text, nullable=False)

    aggregate_score = Column(Integer, nullable=False, default=0)

    placement_status = Column(Text, nullable=False, default='not_requested')
    placement_eligible = Column(Boolean, nullable=False, default=False)
    placement_admin_remarks = Column(Text, nullable=False, default='')
    placement_reviewed_at = Column(TIMESTAMP(timezone=True))

    # Placement outcome
    placed_company = Column(Text)
    placed_position = Column(Text)
    placed_salary = Column(Float)
    placed_date = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    skills = relationship("StudentSkill", back_populates="student", cascade="all, delete-orphan")
    tests = relationship("StudentTest", back_populates="student", cascade="all, delete-orphan",
                         order_by="StudentTest.date")
    trainer_remarks = relationship("TrainerRemark", back_populates="student", cascade="all, delete-orphan",
                                   order_by="TrainerRemark.date")

    __table_args__ = (
        Index('idx_student_profile_batch', 'batch'),
        Index('idx_student_profile_trainer', 'trainer_id', 'approval_status'),
        Index('idx_student_profile_placement', 'placement_status'),
        Index('idx_student_profile_aggregate', 'aggregate_score'),
    )


class StudentSkill(Base):
    __tablename__ = 'student_skill'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)

    name = Column(Text, nullable=False)
    level = Column(Integer, nullable=False)  # 0-100
    tags = Column(JSON, default=list)
    last_updated = Column(TIMESTAMP(timezone=True), server_default=func.now())

    student = relationship("StudentProfile", back_populates="skills")

    __table_args__ = (
        Index('idx_student_skill_name', 'name'),
    )


class StudentTest(Base):
    __tablename__ = 'student_test'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)

    title = Column(Text, nullable=False)
    date = Column(TIMESTAMP(timezone=True), nullable=False)
    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=100)
    subject_breakdown = Column(JSON, default=list)  # [{"subject": ..., "marks": ...}]
    added_by = Column(Uuid)

    student = relationship("StudentProfile", back_populates="tests")


class TrainerRemark(Base):
    __tablename__ = 'trainer_remark'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)
    trainer_id = Column(Uuid, nullable=False)

    date = Column(TIMESTAMP(timezone=True), nullable=False)
    remark = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5

    student = relationship("StudentProfile", back_populates="trainer_remarks")
