#!/usr/bin/env python3
"""
Periodic trainer evaluations.

Weekly types (aptitude, logical, machine) are keyed by the UTC Monday of
the recorded date; spring_meet is monthly and keyed by the first of the
UTC month. Recording the same (student, type, period) twice overwrites the
earlier score.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional
import logging

from database.models import StudentEvaluation, StudentProfile
from database.repositories.base import as_uuid
from database.uow import UnitOfWork
from core.exceptions import StudentNotFoundException, InvalidStateException, ValidationException
from core.scorer.effective_score import compute_effective_score, monthly_averages
from core.utils import as_utc, utc_now, safe_float

logger = logging.getLogger(__name__)

EVALUATION_TYPES: Dict[str, Dict[str, Any]] = {
    'aptitude': {'frequency': 'weekly', 'default_max': 25},
    'logical': {'frequency': 'weekly', 'default_max': 25},
    'machine': {'frequency': 'weekly', 'default_max': 25},
    'spring_meet': {'frequency': 'monthly', 'default_max': 100},
}

APTITUDE_MAX_SCORE = 25

_END_OF_DAY = timedelta(days=1) - timedelta(milliseconds=1)


@dataclass
class PerformanceSummary:
    student: StudentProfile
    effective_score: float
    monthly_averages: Dict[str, float]
    type_averages: Dict[str, Optional[float]]


def get_type_config(evaluation_type: str) -> Dict[str, Any]:
    config = EVALUATION_TYPES.get(evaluation_type)
    if config is None:
        raise ValidationException(
            f"Unknown evaluation type '{evaluation_type}'; expected one of {sorted(EVALUATION_TYPES)}"
        )
    return config


def _week_range(date: datetime) -> Dict[str, Any]:
    day = date.replace(hour=0, minute=0, second=0, microsecond=0)
    start = day - timedelta(days=day.weekday())
    end = start + timedelta(days=6) + _END_OF_DAY
    return {
        'period_start': start,
        'period_end': end,
        'period_label': f"Week of {start.strftime('%b')} {start.day}, {start.year}",
    }


def _month_range(date: datetime) -> Dict[str, Any]:
    start = date.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return {
        'period_start': start,
        'period_end': next_month - timedelta(milliseconds=1),
        'period_label': start.strftime('%B %Y'),
    }


def get_period_metadata(evaluation_type: str, recorded_date: datetime) -> Dict[str, Any]:
    """Period bounds and display label for an evaluation recorded on a date.

    Args:
        evaluation_type: One of EVALUATION_TYPES
        recorded_date: When the evaluation happened (naive means UTC)

    Returns:
        Dict with period_start, period_end (inclusive, millisecond precision)
        and period_label

    Example:
        >>> get_period_metadata('aptitude', datetime(2025, 1, 8))['period_label']
        'Week of Jan 6, 2025'
    """
    config = get_type_config(evaluation_type)
    date = as_utc(recorded_date)
    if config['frequency'] == 'monthly':
        return _month_range(date)
    return _week_range(date)


def average_percentage(evaluations: Iterable[Any]) -> Optional[float]:
    """Plain mean of score/max_score*100; None without usable evaluations."""
    percentages: List[float] = []
    for evaluation in evaluations or []:
        max_score = safe_float(getattr(evaluation, 'max_score', None))
        score = safe_float(getattr(evaluation, 'score', None))
        if not max_score or score is None:
            continue
        percentages.append(score / max_score * 100)

    if not percentages:
        return None
    return sum(percentages) / len(percentages)


class EvaluationService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def record_evaluation(
        self,
        student_id: Any,
        trainer_id: Any,
        evaluation_type: str,
        score: float,
        max_score: Optional[float] = None,
        recorded_date: Optional[datetime] = None,
        notes: Optional[str] = None
    ) -> StudentEvaluation:
        """Create or overwrite the evaluation for the period of recorded_date.

        Raises:
            ValidationException: Unknown type, aptitude not out of 25,
                score above max
            StudentNotFoundException: Student does not exist
            InvalidStateException: Student is not assigned to this trainer
        """
        config = get_type_config(evaluation_type)
        max_score = max_score or config['default_max']

        if evaluation_type == 'aptitude' and max_score != APTITUDE_MAX_SCORE:
            raise ValidationException(f"Aptitude test must be out of {APTITUDE_MAX_SCORE} marks")

        if score < 0:
            raise ValidationException("Score cannot be negative")

        if score > max_score:
            raise ValidationException("Score cannot exceed maximum score")

        student = self.uow.students.get_by_id(student_id)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")

        if student.trainer_id != as_uuid(trainer_id):
            logger.warning(f"Trainer {trainer_id} tried to evaluate student {student_id} not assigned to them")
            raise InvalidStateException(f"Student {student_id} is not assigned to trainer {trainer_id}")

        recorded_date = as_utc(recorded_date) if recorded_date else utc_now()
        period = get_period_metadata(evaluation_type, recorded_date)

        evaluation = self.uow.evaluations.get_for_period(student.id, evaluation_type, period['period_start'])
        created = evaluation is None
        if created:
            evaluation = self.uow.evaluations.add(StudentEvaluation(
                student_id=student.id,
                type=evaluation_type,
                period_start=period['period_start'],
            ))

        evaluation.trainer_id = as_uuid(trainer_id)
        evaluation.frequency = config['frequency']
        evaluation.recorded_date = recorded_date
        evaluation.period_end = period['period_end']
        evaluation.period_label = period['period_label']
        evaluation.score = score
        evaluation.max_score = max_score
        evaluation.notes = notes
        evaluation.last_updated_by = as_uuid(trainer_id)

        self.uow.flush()
        logger.info(
            f"{'Recorded' if created else 'Updated'} {evaluation_type} evaluation for student {student.id} "
            f"({period['period_label']}): {score}/{max_score}"
        )
        return evaluation

    def list_evaluations(self, student_id: Any) -> List[StudentEvaluation]:
        return self.uow.evaluations.list_for_student(student_id)

    def effective_score(self, student_id: Any) -> float:
        """Month-bucketed evaluation score used at application time."""
        student = self.uow.students.get_by_id(student_id)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")
        return compute_effective_score(student, self.uow.evaluations.list_for_student(student.id))

    def performance_summary(self, student_id: Any) -> PerformanceSummary:
        """Effective score with the month and type averages behind it.

        Months are keyed 'YYYY-MM' in chronological order. Every known
        evaluation type is present; types with no evaluations map to None.
        """
        student = self.uow.students.get_by_id(student_id)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")

        evaluations = self.uow.evaluations.list_for_student(student.id)
        months = monthly_averages(evaluations)

        return PerformanceSummary(
            student=student,
            effective_score=compute_effective_score(student, evaluations),
            monthly_averages={f"{year:04d}-{month:02d}": months[(year, month)] for year, month in sorted(months)},
            type_averages={
                evaluation_type: average_percentage(e for e in evaluations if e.type == evaluation_type)
                for evaluation_type in EVALUATION_TYPES
            },
        )
