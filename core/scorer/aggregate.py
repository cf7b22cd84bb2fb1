#!/usr/bin/env python3
"""
Aggregate Score - the persisted 0-100 performance score that gates job listings.

Formula: round(0.7 * mean test percentage + 0.3 * (mean rating - 1) * 25)
"""

from typing import Any, Tuple
import logging

from core.utils import round_half_up
from core.scorer.components import collect_test_percentages, collect_ratings

logger = logging.getLogger(__name__)

TEST_WEIGHT = 0.7
TRAINER_WEIGHT = 0.3

ELIGIBLE_STATUSES = frozenset({'approved', 'placed'})


def is_placement_eligible(placement_status: str) -> bool:
    return placement_status in ELIGIBLE_STATUSES


def compute_aggregate_score(student: Any) -> Tuple[int, bool]:
    """
    Derive (aggregate_score, placement_eligible) from a student profile.

    - test part: mean of score/max_score*100 (0 with no usable tests)
    - trainer part: (mean rating - 1) * 25 (0 with no remarks)

    Pure; calling it twice on an unchanged profile yields the same pair.
    """
    percentages = collect_test_percentages(getattr(student, 'tests', None))
    test_score = sum(percentages) / len(percentages) if percentages else 0.0

    ratings = collect_ratings(getattr(student, 'trainer_remarks', None))
    trainer_score = (sum(ratings) / len(ratings) - 1) * 25 if ratings else 0.0

    score = round_half_up(test_score * TEST_WEIGHT + trainer_score * TRAINER_WEIGHT)
    eligible = is_placement_eligible(getattr(student, 'placement_status', None))

    return score, eligible


def apply_aggregate_score(student: Any) -> int:
    """Recompute and store aggregate_score and placement_eligible together.

    Every mutation of tests, trainer_remarks or placement_status must end
    with this call.
    """
    score, eligible = compute_aggregate_score(student)
    student.aggregate_score = score
    student.placement_eligible = eligible
    logger.debug(f"Student {getattr(student, 'id', None)}: aggregate={score}, eligible={eligible}")
    return score
