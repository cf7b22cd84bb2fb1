#!/usr/bin/env python3
"""
Match Score - compatibility of one student with one job (0-100).

    total = round(skill * w_skills + test * w_tests + trainer * w_trainer + recency_boost)

clamped to [0, 100]. The boost is added after weighting, so a strong
recent-activity record can lift a 95 to 100 but never past it.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union
import logging

from core.config_loader import MatchWeights, DEFAULT_MATCH_WEIGHTS
from core.utils import round_half_up, utc_now
from core.scorer.models import MatchResult
from core.scorer import components

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _remark_summary(remark: Any) -> Dict[str, Any]:
    return {
        'trainer_id': str(getattr(remark, 'trainer_id', '') or ''),
        'date': _iso(getattr(remark, 'date', None)),
        'remark': getattr(remark, 'remark', None),
        'rating': getattr(remark, 'rating', None),
    }


def score_match(
    student: Any,
    job: Any,
    weights: Optional[Union[MatchWeights, Dict[str, float]]] = None,
    explain: bool = False,
    now: Optional[datetime] = None,
    recency_window_days: int = components.DEFAULT_RECENCY_WINDOW_DAYS
) -> MatchResult:
    """Calculate the match score for a student-job pair.

    Args:
        student: Student profile (skills, tests, trainer_remarks, aggregate_score)
        job: Job posting (required_skills)
        weights: Sub-score weights; DEFAULT_MATCH_WEIGHTS when omitted
        explain: Attach a per-component breakdown
        now: Reference time for the recency boost (defaults to current UTC time)
        recency_window_days: Activity window for the recency boost

    Returns:
        MatchResult with total_score and, if requested, explanation
    """
    if isinstance(weights, dict):
        weights = MatchWeights(**weights)
    weights = weights or DEFAULT_MATCH_WEIGHTS
    now = now or utc_now()

    skills = getattr(student, 'skills', None) or []
    tests = getattr(student, 'tests', None) or []
    remarks = getattr(student, 'trainer_remarks', None) or []
    required_skills = getattr(job, 'required_skills', None) or []

    skill_score = components.calculate_skill_score(skills, required_skills)
    test_score = components.calculate_test_score(getattr(student, 'aggregate_score', None))
    trainer_score = components.calculate_trainer_score(remarks)
    recency_boost = components.calculate_recency_boost(tests, remarks, now, recency_window_days)

    base_score = (
        skill_score * weights.skills
        + test_score * weights.tests
        + trainer_score * weights.trainer
    )
    total_score = max(0, min(100, round_half_up(base_score + recency_boost)))

    logger.debug(
        f"Match {getattr(student, 'id', None)} x {getattr(job, 'id', None)}: "
        f"skill={skill_score}, test={test_score}, trainer={trainer_score}, "
        f"boost={recency_boost}, total={total_score}"
    )

    if not explain:
        return MatchResult(total_score=total_score)

    explanation: Dict[str, Any] = {
        'skill_score': {
            'score': skill_score,
            'weight': weights.skills,
            'contribution': skill_score * weights.skills,
            'details': components.skill_match_details(skills, required_skills),
        },
        'test_score': {
            'score': test_score,
            'weight': weights.tests,
            'contribution': test_score * weights.tests,
            'details': {
                'aggregate_score': getattr(student, 'aggregate_score', None),
                'test_count': len(tests),
                'average_score': components.average_test_percentage(tests),
            },
        },
        'trainer_score': {
            'score': trainer_score,
            'weight': weights.trainer,
            'contribution': trainer_score * weights.trainer,
            'details': {
                'average_rating': components.average_trainer_rating(remarks),
                'remark_count': len(remarks),
                'recent_remarks': [_remark_summary(r) for r in list(remarks)[-3:]],
            },
        },
        'recency_boost': {
            'score': recency_boost,
            'details': {
                'last_test_date': _iso(components.last_activity_date(tests)),
                'last_remark_date': _iso(components.last_activity_date(remarks)),
            },
        },
        'base_score': round_half_up(base_score),
        'total_score': total_score,
        'weights': weights.model_dump(),
        'timestamp': now.isoformat(),
    }

    return MatchResult(total_score=total_score, explanation=explanation)
