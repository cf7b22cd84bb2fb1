#!/usr/bin/env python3
"""
Effective Score - evaluation-based aggregate checked at application time.

Evaluations are bucketed by the UTC calendar month of their period, each
month is averaged on its own, and the month averages are averaged again.
A month with ten evaluations weighs the same as a month with one:

    {Jan: [80, 100], Feb: [50]}  ->  mean(90, 50) = 70   (not 76.67)

This is not the persisted aggregate_score (tests + trainer remarks). Job
listings filter on the persisted score; applications check this one.
"""

from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from core.utils import as_utc, safe_float

logger = logging.getLogger(__name__)

MonthKey = Tuple[int, int]


def _bucket_date(evaluation: Any) -> Optional[datetime]:
    for field in ('period_start', 'recorded_date', 'created_at'):
        value = getattr(evaluation, field, None)
        if isinstance(value, datetime):
            return as_utc(value)
    return None


def monthly_averages(evaluations: Iterable[Any]) -> Dict[MonthKey, float]:
    """Mean percentage per UTC (year, month).

    Evaluations without any usable date, or with a falsy max_score, carry
    no signal and are skipped.
    """
    buckets: Dict[MonthKey, List[float]] = OrderedDict()

    for evaluation in evaluations:
        date = _bucket_date(evaluation)
        if date is None:
            continue

        max_score = safe_float(getattr(evaluation, 'max_score', None))
        score = safe_float(getattr(evaluation, 'score', None))
        if not max_score or score is None:
            continue

        buckets.setdefault((date.year, date.month), []).append(score / max_score * 100)

    return {key: sum(values) / len(values) for key, values in buckets.items() if values}


def compute_effective_score(student: Any, evaluations: Optional[Iterable[Any]]) -> float:
    """
    Mean of the per-month evaluation averages.

    Falls back to the student's persisted aggregate_score (0 if absent) when
    there are no evaluations or none of them yields a value.
    """
    averages = monthly_averages(evaluations or [])

    if not averages:
        fallback = safe_float(getattr(student, 'aggregate_score', None))
        return fallback if fallback is not None else 0

    effective = sum(averages.values()) / len(averages)
    logger.debug(f"Effective score {effective:.2f} from {len(averages)} month(s)")
    return effective
