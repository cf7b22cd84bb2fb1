import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Float, Uuid, UniqueConstraint, Index, func

from .base import Base


class StudentEvaluation(Base):
    """
    Periodic trainer assessment of one student.

    One row per (student, type, period_start): re-recording the same
    period overwrites the score.
    """
    __tablename__ = 'student_evaluation'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)
    trainer_id = Column(Uuid, nullable=False)

    type = Column(Text, nullable=False)  # aptitude|logical|machine|spring_meet
    frequency = Column(Text, nullable=False)  # weekly|monthly

    recorded_date = Column(TIMESTAMP(timezone=True), nullable=False)
    period_start = Column(TIMESTAMP(timezone=True), nullable=False)
    period_end = Column(TIMESTAMP(timezone=True), nullable=False)
    period_label = Column(Text, nullable=False)

    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=25)
    notes = Column(Text)
    last_updated_by = Column(Uuid)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('student_id', 'type', 'period_start', name='uq_student_evaluation_period'),
        Index('idx_student_evaluation_trainer', 'trainer_id'),
        Index('idx_student_evaluation_period', 'period_start'),
    )
