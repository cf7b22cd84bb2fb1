import logging
from datetime import datetime
from typing import List, Optional, Any

from sqlalchemy import select

from database.models import StudentEvaluation
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class EvaluationRepository(BaseRepository):
    def list_for_student(self, student_id: Any, trainer_id: Optional[Any] = None) -> List[StudentEvaluation]:
        """All evaluations of a student ordered by period (any type; any
        trainer unless trainer_id is given)."""
        stmt = select(StudentEvaluation).where(StudentEvaluation.student_id == as_uuid(student_id))
        if trainer_id is not None:
            stmt = stmt.where(StudentEvaluation.trainer_id == as_uuid(trainer_id))
        stmt = stmt.order_by(StudentEvaluation.period_start, StudentEvaluation.type)
        return list(self.db.execute(stmt).scalars().all())

    def get_for_period(self, student_id: Any, evaluation_type: str, period_start: datetime) -> Optional[StudentEvaluation]:
        stmt = select(StudentEvaluation).where(
            StudentEvaluation.student_id == as_uuid(student_id),
            StudentEvaluation.type == evaluation_type,
            StudentEvaluation.period_start == period_start
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add(self, evaluation: StudentEvaluation) -> StudentEvaluation:
        self.db.add(evaluation)
        return evaluation
