#!/usr/bin/env python3
"""
Tests for the persisted aggregate score.
"""

import unittest
from types import SimpleNamespace

from core.scorer import compute_aggregate_score, apply_aggregate_score
from core.scorer.aggregate import is_placement_eligible


def student(tests=(), ratings=(), placement_status='not_requested'):
    return SimpleNamespace(
        id='s-1',
        tests=[SimpleNamespace(score=s, max_score=m) for s, m in tests],
        trainer_remarks=[SimpleNamespace(rating=r) for r in ratings],
        placement_status=placement_status,
        aggregate_score=None,
        placement_eligible=None,
    )


class TestAggregateScore(unittest.TestCase):

    def test_empty_profile(self):
        self.assertEqual(compute_aggregate_score(student()), (0, False))

    def test_weighted_tests_and_ratings(self):
        # tests: 80% and 90% -> 85 * 0.7 = 59.5; ratings 4.5 -> 87.5 * 0.3 = 26.25
        score, eligible = compute_aggregate_score(student(tests=[(80, 100), (45, 50)], ratings=[4, 5]))
        self.assertEqual(score, 86)
        self.assertFalse(eligible)

    def test_halves_round_up(self):
        # 75% * 0.7 = 52.5
        self.assertEqual(compute_aggregate_score(student(tests=[(75, 100)]))[0], 53)

    def test_falsy_max_score_is_skipped(self):
        score, _ = compute_aggregate_score(student(tests=[(50, 0), (100, 100)]))
        self.assertEqual(score, 70)

    def test_eligibility_follows_status(self):
        for status, expected in [
            ('approved', True), ('placed', True), ('pending', False),
            ('rejected', False), ('removed', False), ('not_requested', False),
        ]:
            self.assertEqual(is_placement_eligible(status), expected, status)
            self.assertEqual(compute_aggregate_score(student(placement_status=status))[1], expected)

    def test_apply_sets_both_fields(self):
        s = student(tests=[(90, 100)], ratings=[5], placement_status='approved')
        returned = apply_aggregate_score(s)
        # 63 + 30
        self.assertEqual(returned, 93)
        self.assertEqual(s.aggregate_score, 93)
        self.assertTrue(s.placement_eligible)

    def test_apply_is_idempotent(self):
        s = student(tests=[(33, 50), (17, 25)], ratings=[2, 3, 5], placement_status='placed')
        apply_aggregate_score(s)
        first = (s.aggregate_score, s.placement_eligible)
        apply_aggregate_score(s)
        self.assertEqual((s.aggregate_score, s.placement_eligible), first)


if __name__ == '__main__':
    unittest.main()
