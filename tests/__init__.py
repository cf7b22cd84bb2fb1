#!/usr/bin/env python3
"""
Test suite utilities.

All tests run against an in-memory SQLite database (see tests/conftest.py),
so no external service is needed:

    python -m pytest tests/ -v

    # Only the pure scoring tests
    python -m pytest tests/unit/core/scorer -v

The factories below build persisted rows with sensible defaults; pass
keyword arguments to override any column.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from database.models import (
    StudentProfile,
    StudentSkill,
    StudentTest,
    TrainerRemark,
    JobPosting,
    JobRequiredSkill,
    StudentEvaluation,
)

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


def days_ago(days: int, now: datetime = NOW) -> datetime:
    return now - timedelta(days=days)


def make_student(
    session,
    skills: Iterable[Tuple[str, int]] = (),
    tests: Iterable[Tuple[float, float, datetime]] = (),
    ratings: Iterable[Tuple[int, datetime]] = (),
    **overrides: Any
) -> StudentProfile:
    """Persist a student profile.

    Args:
        session: SQLAlchemy session
        skills: (name, level) pairs
        tests: (score, max_score, date) triples
        ratings: (rating, date) pairs for trainer remarks
        **overrides: Column values (roll_no, trainer_id, placement_status, ...)
    """
    fields: Dict[str, Any] = {
        'roll_no': f"R-{uuid.uuid4().hex[:8]}",
        'full_name': 'Test Student',
        'program': 'MCA',
        'batch': '2025',
        'trainer_id': uuid.uuid4(),
        'approval_status': 'approved',
        'placement_status': 'not_requested',
        'placement_eligible': False,
        'aggregate_score': 0,
    }
    fields.update(overrides)

    student = StudentProfile(**fields)
    student.skills = [StudentSkill(name=name, level=level, tags=[]) for name, level in skills]
    student.tests = [
        StudentTest(title=f"Test {i}", score=score, max_score=max_score, date=date)
        for i, (score, max_score, date) in enumerate(tests, start=1)
    ]
    student.trainer_remarks = [
        TrainerRemark(trainer_id=fields['trainer_id'] or uuid.uuid4(), remark='Keep going', rating=rating, date=date)
        for rating, date in ratings
    ]
    session.add(student)
    session.flush()
    return student


def make_placed_ready_student(session, aggregate_score: int = 80, **overrides: Any) -> StudentProfile:
    """An approved, eligible student as the candidate ranker expects them."""
    overrides.setdefault('placement_status', 'approved')
    overrides.setdefault('placement_eligible', True)
    return make_student(session, aggregate_score=aggregate_score, **overrides)


def make_job(
    session,
    required_skills: Iterable[Tuple[str, int]] = (),
    **overrides: Any
) -> JobPosting:
    fields: Dict[str, Any] = {
        'title': 'Backend Developer',
        'company_name': 'Acme Corp',
        'description': 'Build services',
        'min_aggregate_score': 0,
        'eligible_batches': [],
        'eligible_programs': [],
        'status': 'open',
        'is_active': True,
    }
    fields.update(overrides)

    job = JobPosting(**fields)
    job.required_skills = [JobRequiredSkill(name=name, min_level=level) for name, level in required_skills]
    session.add(job)
    session.flush()
    return job


def make_evaluation(
    session,
    student: StudentProfile,
    score: float,
    max_score: float = 100,
    period_start: Optional[datetime] = None,
    trainer_id: Optional[uuid.UUID] = None,
    evaluation_type: str = 'spring_meet'
) -> StudentEvaluation:
    period_start = period_start or NOW
    evaluation = StudentEvaluation(
        student_id=student.id,
        trainer_id=trainer_id or student.trainer_id,
        type=evaluation_type,
        frequency='monthly' if evaluation_type == 'spring_meet' else 'weekly',
        recorded_date=period_start,
        period_start=period_start,
        period_end=period_start + timedelta(days=6),
        period_label='test period',
        score=score,
        max_score=max_score,
    )
    session.add(evaluation)
    session.flush()
    return evaluation
