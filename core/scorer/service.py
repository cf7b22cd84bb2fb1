#!/usr/bin/env python3
"""
Matching Service - ranks eligible students for a job.

Read-only: it loads the job and the eligible population, scores every pair
with score_match and returns the best candidates. Nothing is written.
"""

from datetime import datetime
from typing import List, Optional, Any, Dict, Union
import logging

from database.uow import UnitOfWork
from core.config_loader import MatchingConfig, MatchWeights
from core.exceptions import JobNotFoundException, StudentNotFoundException, InvalidStateException
from core.utils import utc_now
from core.scorer.models import MatchResult, RankedCandidate
from core.scorer.match_score import score_match
from core.jobs import is_job_open

logger = logging.getLogger(__name__)


class MatchingService:
    """
    Service for ranking candidates and explaining match scores.

    Weights, recency window and limits come from MatchingConfig; callers
    may override the weights per request.
    """

    def __init__(self, uow: UnitOfWork, config: Optional[MatchingConfig] = None):
        self.uow = uow
        self.config = config or MatchingConfig()

    def _weights(self, weights: Optional[Union[MatchWeights, Dict[str, float]]]) -> MatchWeights:
        if weights is None:
            return self.config.scorer.weights
        if isinstance(weights, dict):
            return MatchWeights(**weights)
        return weights

    def rank_candidates(
        self,
        job_id: Any,
        weights: Optional[Union[MatchWeights, Dict[str, float]]] = None,
        limit: Optional[int] = None,
        include_explanation: bool = False,
        now: Optional[datetime] = None
    ) -> List[RankedCandidate]:
        """Find and rank eligible students for a job.

        Args:
            job_id: Job posting ID
            weights: Custom sub-score weights (config defaults when omitted)
            limit: Maximum number of candidates (config default_limit when omitted)
            include_explanation: Attach a score breakdown to every candidate
            now: Reference time for deadline and recency checks

        Returns:
            Candidates sorted by match score (highest first), ties by student id

        Raises:
            JobNotFoundException: If the job does not exist
            InvalidStateException: If the job is not open
        """
        now = now or utc_now()
        weights = self._weights(weights)
        if limit is None:
            limit = self.config.ranking.default_limit
        limit = max(0, min(limit, self.config.ranking.max_limit))

        job = self.uow.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(f"Job {job_id} not found")

        if not is_job_open(job, now):
            raise InvalidStateException(f"Job {job_id} is not open for applications")

        students = self.uow.students.find_rankable(
            min_aggregate_score=job.min_aggregate_score,
            batches=job.eligible_batches,
            programs=job.eligible_programs
        )
        applied = self.uow.jobs.applicant_ids(job)

        candidates: List[RankedCandidate] = []
        for student in students:
            if student.id in applied:
                continue

            result = score_match(
                student,
                job,
                weights=weights,
                explain=include_explanation,
                now=now,
                recency_window_days=self.config.scorer.recency_window_days
            )
            if result.total_score <= 0:
                continue

            candidates.append(RankedCandidate(
                student=student,
                match_score=result.total_score,
                explanation=result.explanation
            ))

        candidates.sort(key=lambda c: (-c.match_score, str(c.student.id)))

        logger.info(
            f"Ranked {len(candidates)} candidates for job {job_id} "
            f"(pool={len(students)}, already applied={len(applied)}), returning top {min(limit, len(candidates))}"
        )
        return candidates[:limit]

    def explain_match(
        self,
        student_id: Any,
        job_id: Any,
        weights: Optional[Union[MatchWeights, Dict[str, float]]] = None,
        now: Optional[datetime] = None
    ) -> MatchResult:
        """Score one student against one job with a full breakdown.

        Raises:
            StudentNotFoundException: If the student does not exist
            JobNotFoundException: If the job does not exist
        """
        student = self.uow.students.get_by_id(student_id)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")

        job = self.uow.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(f"Job {job_id} not found")

        return score_match(
            student,
            job,
            weights=self._weights(weights),
            explain=True,
            now=now,
            recency_window_days=self.config.scorer.recency_window_days
        )
