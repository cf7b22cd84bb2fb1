#!/usr/bin/env python3
"""
Match Sub-scores - skill, test, trainer and recency components.

Each function is pure: it reads already-loaded profile data and never
touches the database. Inputs may be ORM rows or plain dicts with the same
field names (name, level, min_level, date, score, max_score, rating).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

from core.utils import round_half_up, as_utc, safe_float

logger = logging.getLogger(__name__)

# ----------------------------
# Tunable defaults
# ----------------------------
SKILL_EXCESS_CAP = 20            # levels above min_level that still earn bonus
MAX_SKILL_SCORE = 100

NEUTRAL_TRAINER_SCORE = 50       # no remarks yet
NEUTRAL_TRAINER_RATING = 3.0

DEFAULT_RECENCY_WINDOW_DAYS = 30
TEST_BOOST_PER_ITEM = 2
TEST_BOOST_CAP = 5
REMARK_BOOST_PER_ITEM = 1
REMARK_BOOST_CAP = 3
RECENCY_BOOST_CAP = 10


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _skill_index(skills: Optional[Iterable[Any]]) -> Dict[str, Any]:
    # First occurrence wins for duplicate names.
    index: Dict[str, Any] = {}
    for skill in skills or []:
        name = (_get(skill, 'name') or '').strip().lower()
        if name and name not in index:
            index[name] = skill
    return index


# ----------------------------
# Skills
# ----------------------------
def calculate_skill_score(student_skills: Optional[Sequence[Any]], required_skills: Optional[Sequence[Any]]) -> int:
    """
    Skill match score (0-100).

    Each required skill the student holds at or above min_level earns
    1.0 plus up to 0.2 for exceeding the bar by up to 20 levels; missing
    or under-level skills earn 0. The mean credit is scaled to 100 and
    capped there.

    Returns 100 when the job requires nothing, 0 when the student lists no
    skills at all.
    """
    if not required_skills:
        return MAX_SKILL_SCORE

    if not student_skills:
        return 0

    index = _skill_index(student_skills)
    matched_weight = 0.0

    for required in required_skills:
        student_skill = index.get((_get(required, 'name') or '').strip().lower())
        if student_skill is None:
            continue

        level = safe_float(_get(student_skill, 'level')) or 0.0
        min_level = safe_float(_get(required, 'min_level')) or 0.0
        if level >= min_level:
            excess = min(level - min_level, SKILL_EXCESS_CAP)
            matched_weight += 1 + excess / 100

    score = round_half_up(matched_weight / len(required_skills) * 100)
    return min(MAX_SKILL_SCORE, score)


def skill_match_details(student_skills: Optional[Sequence[Any]], required_skills: Optional[Sequence[Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Matched / missing / additional skills for the explanation payload."""
    details: Dict[str, List[Dict[str, Any]]] = {
        'matched': [],
        'missing': [],
        'additional': [],
    }

    index = _skill_index(student_skills)
    required_names = set()

    for required in required_skills or []:
        name = _get(required, 'name') or ''
        required_names.add(name.strip().lower())
        min_level = _get(required, 'min_level')
        student_skill = index.get(name.strip().lower())

        if student_skill is not None:
            level = _get(student_skill, 'level')
            details['matched'].append({
                'name': name,
                'required': min_level,
                'actual': level,
                'meets': (safe_float(level) or 0.0) >= (safe_float(min_level) or 0.0),
            })
        else:
            details['missing'].append({'name': name, 'required': min_level})

    for skill in student_skills or []:
        name = _get(skill, 'name') or ''
        if name.strip().lower() not in required_names:
            details['additional'].append({'name': name, 'level': _get(skill, 'level')})

    return details


# ----------------------------
# Tests
# ----------------------------
def calculate_test_score(aggregate_score: Optional[float]) -> float:
    """The persisted aggregate score, reused as-is (0 when absent)."""
    return safe_float(aggregate_score) or 0


def collect_test_percentages(tests: Optional[Sequence[Any]]) -> List[float]:
    """score/max_score*100 for every test; tests without a usable max_score are skipped."""
    percentages = []
    for test in tests or []:
        max_score = safe_float(_get(test, 'max_score'))
        score = safe_float(_get(test, 'score'))
        if not max_score or score is None:
            continue
        percentages.append(score / max_score * 100)
    return percentages


def average_test_percentage(tests: Optional[Sequence[Any]]) -> int:
    percentages = collect_test_percentages(tests)
    if not percentages:
        return 0
    return round_half_up(sum(percentages) / len(percentages))


# ----------------------------
# Trainer remarks
# ----------------------------
def collect_ratings(remarks: Optional[Sequence[Any]]) -> List[float]:
    ratings = []
    for remark in remarks or []:
        rating = safe_float(_get(remark, 'rating'))
        if rating is not None:
            ratings.append(rating)
    return ratings


def average_trainer_rating(remarks: Optional[Sequence[Any]]) -> float:
    """Mean rating rounded to one decimal; 3.0 (neutral) with no remarks."""
    ratings = collect_ratings(remarks)
    if not ratings:
        return NEUTRAL_TRAINER_RATING
    return round_half_up(sum(ratings) / len(ratings) * 10) / 10


def calculate_trainer_score(remarks: Optional[Sequence[Any]]) -> int:
    """Map the 1-5 average rating onto 0-100; 50 when there are no remarks."""
    if not collect_ratings(remarks):
        return NEUTRAL_TRAINER_SCORE
    return round_half_up((average_trainer_rating(remarks) - 1) * 25)


# ----------------------------
# Recency
# ----------------------------
def _count_recent(items: Optional[Sequence[Any]], threshold: datetime) -> int:
    count = 0
    for item in items or []:
        date = _get(item, 'date')
        if isinstance(date, datetime) and as_utc(date) > threshold:
            count += 1
    return count


def calculate_recency_boost(
    tests: Optional[Sequence[Any]],
    remarks: Optional[Sequence[Any]],
    now: datetime,
    window_days: int = DEFAULT_RECENCY_WINDOW_DAYS
) -> int:
    """
    Activity bonus (0-10) added after weighting.

    +2 per test in the window (max 5) and +1 per remark in the window (max 3).
    """
    threshold = as_utc(now) - timedelta(days=window_days)

    boost = 0
    recent_tests = _count_recent(tests, threshold)
    if recent_tests:
        boost += min(TEST_BOOST_CAP, recent_tests * TEST_BOOST_PER_ITEM)

    recent_remarks = _count_recent(remarks, threshold)
    if recent_remarks:
        boost += min(REMARK_BOOST_CAP, recent_remarks * REMARK_BOOST_PER_ITEM)

    return min(RECENCY_BOOST_CAP, boost)


def last_activity_date(items: Optional[Sequence[Any]]) -> Optional[datetime]:
    dates = [as_utc(_get(item, 'date')) for item in items or [] if isinstance(_get(item, 'date'), datetime)]
    return max(dates) if dates else None
