#!/usr/bin/env python3
"""
Scoring Module - match, aggregate and effective scores.

Public API:
- score_match: 0-100 compatibility of one student with one job
- compute_aggregate_score / apply_aggregate_score: persisted performance score
- compute_effective_score: month-bucketed evaluation score used when applying
- MatchingService: candidate ranking and score explanation

Modules:

- components.py: Skill, test, trainer and recency sub-scores
- match_score.py: Weighted combination of the sub-scores
- aggregate.py: Aggregate score and placement eligibility
- effective_score.py: Evaluation-based score reconciliation
- models.py: Data structures (MatchResult, RankedCandidate)
- service.py: MatchingService orchestrator
"""

from core.scorer.models import MatchResult, RankedCandidate
from core.scorer.match_score import score_match
from core.scorer.aggregate import compute_aggregate_score, apply_aggregate_score
from core.scorer.effective_score import compute_effective_score
from core.scorer.service import MatchingService

__all__ = [
    'MatchResult',
    'RankedCandidate',
    'score_match',
    'compute_aggregate_score',
    'apply_aggregate_score',
    'compute_effective_score',
    'MatchingService',
]
