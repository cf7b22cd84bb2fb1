#!/usr/bin/env python3
"""
Tests for the month-bucketed effective score.
"""

import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from core.scorer import compute_effective_score
from core.scorer.effective_score import monthly_averages


def evaluation(score, max_score=100, period_start=None, recorded_date=None, created_at=None):
    return SimpleNamespace(
        score=score,
        max_score=max_score,
        period_start=period_start,
        recorded_date=recorded_date,
        created_at=created_at,
    )


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


class TestEffectiveScore(unittest.TestCase):

    def setUp(self):
        self.student = SimpleNamespace(aggregate_score=42)

    def test_months_weigh_equally(self):
        evaluations = [
            evaluation(80, period_start=utc(2025, 1, 6)),
            evaluation(25, 25, period_start=utc(2025, 1, 13)),
            evaluation(50, period_start=utc(2025, 2, 3)),
        ]
        self.assertAlmostEqual(compute_effective_score(self.student, evaluations), 70.0)

    def test_falls_back_to_aggregate(self):
        self.assertEqual(compute_effective_score(self.student, []), 42)
        self.assertEqual(compute_effective_score(self.student, None), 42)
        self.assertEqual(compute_effective_score(SimpleNamespace(aggregate_score=None), []), 0)

    def test_unusable_evaluations_fall_back(self):
        evaluations = [evaluation(10, 0, period_start=utc(2025, 1, 1)), evaluation(10)]
        self.assertEqual(compute_effective_score(self.student, evaluations), 42)

    def test_date_fallback_chain(self):
        evaluations = [
            evaluation(60, recorded_date=utc(2025, 3, 2)),
            evaluation(100, created_at=utc(2025, 3, 28)),
        ]
        self.assertEqual(monthly_averages(evaluations), {(2025, 3): 80.0})

    def test_months_are_utc(self):
        # 23:30 on Jan 31 at UTC-2 is Feb 1 in UTC
        tz = timezone(timedelta(hours=-2))
        evaluations = [evaluation(40, period_start=datetime(2025, 1, 31, 23, 30, tzinfo=tz))]
        self.assertEqual(list(monthly_averages(evaluations)), [(2025, 2)])

    def test_not_rounded(self):
        evaluations = [
            evaluation(2, 3, period_start=utc(2025, 4, 1)),
        ]
        self.assertAlmostEqual(compute_effective_score(self.student, evaluations), 66.6666667, places=5)


if __name__ == '__main__':
    unittest.main()
