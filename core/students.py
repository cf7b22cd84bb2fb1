#!/usr/bin/env python3
"""
Student profile mutations.

Tests, trainer remarks and skills feed the scores. Each mutation here ends
with apply_aggregate_score so aggregate_score and placement_eligible never
go stale.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from database.models import StudentProfile, StudentSkill, StudentTest, TrainerRemark
from database.repositories.base import as_uuid
from database.uow import UnitOfWork
from core.exceptions import StudentNotFoundException, InvalidStateException, ValidationException
from core.scorer.aggregate import apply_aggregate_score
from core.utils import as_utc, utc_now

logger = logging.getLogger(__name__)

APPROVAL_STATUSES = ('approved', 'rejected')

MIN_RATING = 1
MAX_RATING = 5


class StudentProfileService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _get(self, student_id: Any) -> StudentProfile:
        student = self.uow.students.get_by_id(student_id, for_update=True)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")
        return student

    def add_test(
        self,
        student_id: Any,
        title: str,
        date: datetime,
        score: float,
        max_score: float = 100,
        subject_breakdown: Optional[List[Dict[str, Any]]] = None,
        added_by: Optional[Any] = None
    ) -> StudentProfile:
        """Append a test result and recompute the aggregate.

        Raises:
            ValidationException: Negative score or max_score below 1
            StudentNotFoundException: Student does not exist
        """
        if score < 0:
            raise ValidationException("Test score cannot be negative")
        if max_score is None or max_score < 1:
            raise ValidationException("Test max_score must be at least 1")

        student = self._get(student_id)
        student.tests.append(StudentTest(
            title=title,
            date=as_utc(date),
            score=score,
            max_score=max_score,
            subject_breakdown=subject_breakdown or [],
            added_by=as_uuid(added_by) if added_by else None,
        ))
        apply_aggregate_score(student)
        self.uow.flush()

        logger.info(f"Added test '{title}' ({score}/{max_score}) to student {student.id}; aggregate={student.aggregate_score}")
        return student

    def add_trainer_remark(
        self,
        student_id: Any,
        trainer_id: Any,
        remark: str,
        rating: int,
        date: Optional[datetime] = None
    ) -> StudentProfile:
        """Append a 1-5 rated trainer remark and recompute the aggregate."""
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationException(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        student = self._get(student_id)
        student.trainer_remarks.append(TrainerRemark(
            trainer_id=as_uuid(trainer_id),
            date=as_utc(date) if date else utc_now(),
            remark=remark,
            rating=rating,
        ))
        apply_aggregate_score(student)
        self.uow.flush()

        logger.info(f"Trainer {trainer_id} rated student {student.id} {rating}/5; aggregate={student.aggregate_score}")
        return student

    def update_skills(self, student_id: Any, skills: List[Dict[str, Any]]) -> StudentProfile:
        """Replace the skill list. Each item: {name, level (0-100), tags}."""
        for skill in skills:
            if not skill.get('name'):
                raise ValidationException("Skill name is required")
            level = skill.get('level')
            if level is None or not 0 <= level <= 100:
                raise ValidationException(f"Skill '{skill.get('name')}' level must be between 0 and 100")

        student = self._get(student_id)
        now = utc_now()
        student.skills = [
            StudentSkill(
                name=skill['name'],
                level=skill['level'],
                tags=list(skill.get('tags') or []),
                last_updated=now,
            )
            for skill in skills
        ]
        apply_aggregate_score(student)
        self.uow.flush()

        logger.info(f"Updated {len(skills)} skill(s) for student {student.id}")
        return student

    def set_approval_status(self, student_id: Any, trainer_id: Any, status: str) -> StudentProfile:
        """Trainer approves or rejects a student assigned to them.

        This is the trainer's sign-off on the profile, separate from the
        placement lifecycle; a placement request needs it to be 'approved'.
        """
        if status not in APPROVAL_STATUSES:
            raise ValidationException(f"Invalid status '{status}'. Must be approved or rejected.")

        student = self._get(student_id)
        if student.trainer_id != as_uuid(trainer_id):
            logger.warning(f"Trainer {trainer_id} tried to review student {student_id} not assigned to them")
            raise InvalidStateException(f"Student {student_id} is not assigned to trainer {trainer_id}")

        student.approval_status = status
        self.uow.flush()

        logger.info(f"Student {student.id} {status} by trainer {trainer_id}")
        return student

    def recompute(self, student_id: Any) -> StudentProfile:
        student = self._get(student_id)
        apply_aggregate_score(student)
        self.uow.flush()
        return student

    def recompute_all(self) -> int:
        """Recompute every profile; returns how many changed."""
        changed = 0
        for student in self.uow.students.list_all():
            before = (student.aggregate_score, student.placement_eligible)
            apply_aggregate_score(student)
            if (student.aggregate_score, student.placement_eligible) != before:
                changed += 1
        self.uow.flush()
        logger.info(f"Recomputed aggregates: {changed} profile(s) changed")
        return changed
