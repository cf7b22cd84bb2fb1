import logging
from typing import List, Optional, Any, Sequence

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from database.models import StudentProfile
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)

_SCORING_LOAD = (
    selectinload(StudentProfile.skills),
    selectinload(StudentProfile.tests),
    selectinload(StudentProfile.trainer_remarks),
)


class StudentRepository(BaseRepository):
    def get_by_id(self, student_id: Any, for_update: bool = False) -> Optional[StudentProfile]:
        """Fetch one profile; with for_update the row is locked until the
        unit of work ends (no-op on SQLite)."""
        stmt = select(StudentProfile).where(StudentProfile.id == as_uuid(student_id))
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user_id(self, user_id: Any) -> Optional[StudentProfile]:
        stmt = select(StudentProfile).where(StudentProfile.user_id == as_uuid(user_id))
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_trainer(self, trainer_id: Any) -> List[StudentProfile]:
        stmt = (
            select(StudentProfile)
            .where(StudentProfile.trainer_id == as_uuid(trainer_id))
            .order_by(StudentProfile.roll_no)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_all(self) -> List[StudentProfile]:
        stmt = select(StudentProfile).options(*_SCORING_LOAD).order_by(StudentProfile.roll_no)
        return list(self.db.execute(stmt).scalars().all())

    def find_rankable(
        self,
        min_aggregate_score: float,
        batches: Optional[Sequence[str]] = None,
        programs: Optional[Sequence[str]] = None
    ) -> List[StudentProfile]:
        """Students that may be matched against a job.

        Only approved, eligible students whose persisted aggregate reaches the
        job's minimum; batch/program filters apply only when non-empty.
        Skills, tests and remarks are eager loaded in batch.
        """
        stmt = select(StudentProfile).where(
            StudentProfile.placement_eligible.is_(True),
            StudentProfile.placement_status == 'approved',
            StudentProfile.aggregate_score >= (min_aggregate_score or 0)
        )

        if batches:
            stmt = stmt.where(StudentProfile.batch.in_(list(batches)))

        if programs:
            stmt = stmt.where(StudentProfile.program.in_(list(programs)))

        stmt = stmt.options(*_SCORING_LOAD)
        students = list(self.db.execute(stmt).scalars().all())
        logger.debug(f"Found {len(students)} rankable students (min_aggregate_score={min_aggregate_score})")
        return students

    def add(self, student: StudentProfile) -> StudentProfile:
        self.db.add(student)
        return student
