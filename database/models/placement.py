import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Float, Uuid, Index, func
from sqlalchemy.sql import text as sql_text
from sqlalchemy.orm import relationship

from .base import Base


class PlacementRequest(Base):
    """
    Trainer-initiated request to move a student into the placement pool.

    At most one pending request per student, backed by a partial unique
    index so two concurrent creators cannot both commit.
    """
    __tablename__ = 'placement_request'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('student_profile.id', ondelete='CASCADE'), nullable=False)
    trainer_id = Column(Uuid, nullable=False)

    avg_score = Column(Float, nullable=True)  # snapshot at creation time
    status = Column(Text, nullable=False, default='pending')  # pending|approved|rejected
    admin_remarks = Column(Text, nullable=False, default='')

    requested_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    reviewed_at = Column(TIMESTAMP(timezone=True))

    student = relationship("StudentProfile")

    __table_args__ = (
        Index('idx_placement_request_student_status', 'student_id', 'status'),
        Index('idx_placement_request_trainer', 'trainer_id', 'requested_at'),
        Index(
            'uq_placement_request_pending',
            'student_id',
            unique=True,
            postgresql_where=sql_text("status = 'pending'"),
            sqlite_where=sql_text("status = 'pending'"),
        ),
    )
