#!/usr/bin/env python3
"""
Job endpoints - candidate ranking, match explanation, applications.
"""

import uuid
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.applications import ApplicationService
from core.config_loader import MatchingConfig, MatchWeights
from core.scorer import MatchingService
from database.uow import UnitOfWork
from ..dependencies import get_uow, get_matching_config
from ..models.requests import ApplyRequest, ApplicantStatusUpdate, ShortlistRequest
from ..models.responses import (
    Candidate,
    StudentSummary,
    MatchesResponse,
    MatchExplanationResponse,
    ApplyResponse,
    ApplicantResponse,
    ApplicantSummary,
    ShortlistResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _weights_override(
    config: MatchingConfig,
    w_skills: Optional[float],
    w_tests: Optional[float],
    w_trainer: Optional[float]
) -> Optional[MatchWeights]:
    """Per-request weights; unspecified ones keep the configured value."""
    if w_skills is None and w_tests is None and w_trainer is None:
        return None
    defaults = config.scorer.weights
    return MatchWeights(
        skills=defaults.skills if w_skills is None else w_skills,
        tests=defaults.tests if w_tests is None else w_tests,
        trainer=defaults.trainer if w_trainer is None else w_trainer
    )


@router.get("/{job_id}/matches", response_model=MatchesResponse)
def get_matches(
    job_id: uuid.UUID,
    limit: Optional[int] = Query(default=None, ge=1, le=500, description="Maximum candidates to return"),
    include_explanation: bool = Query(default=False, description="Attach a score breakdown per candidate"),
    w_skills: Optional[float] = Query(default=None, description="Override the skill weight"),
    w_tests: Optional[float] = Query(default=None, description="Override the test weight"),
    w_trainer: Optional[float] = Query(default=None, description="Override the trainer weight"),
    uow: UnitOfWork = Depends(get_uow),
    config: MatchingConfig = Depends(get_matching_config)
):
    """
    Rank eligible students for an open job.

    Existing applicants are excluded. Returns candidates sorted by
    match score (highest first).
    """
    service = MatchingService(uow, config)
    candidates = service.rank_candidates(
        job_id,
        weights=_weights_override(config, w_skills, w_tests, w_trainer),
        limit=limit,
        include_explanation=include_explanation
    )

    return MatchesResponse(
        success=True,
        job_id=job_id,
        count=len(candidates),
        candidates=[
            Candidate(
                student=StudentSummary.model_validate(c.student),
                match_score=c.match_score,
                explanation=c.explanation
            )
            for c in candidates
        ]
    )


@router.get("/{job_id}/explain/{student_id}", response_model=MatchExplanationResponse)
def explain_match(
    job_id: uuid.UUID,
    student_id: uuid.UUID,
    w_skills: Optional[float] = Query(default=None, description="Override the skill weight"),
    w_tests: Optional[float] = Query(default=None, description="Override the test weight"),
    w_trainer: Optional[float] = Query(default=None, description="Override the trainer weight"),
    uow: UnitOfWork = Depends(get_uow),
    config: MatchingConfig = Depends(get_matching_config)
):
    """Detailed explanation of one student's match score for a job."""
    result = MatchingService(uow, config).explain_match(
        student_id,
        job_id,
        weights=_weights_override(config, w_skills, w_tests, w_trainer)
    )

    return MatchExplanationResponse(
        success=True,
        job_id=job_id,
        student_id=student_id,
        total_score=result.total_score,
        explanation=result.explanation
    )


@router.post("/{job_id}/apply", response_model=ApplyResponse, status_code=201)
def apply_for_job(
    job_id: uuid.UUID,
    body: ApplyRequest,
    uow: UnitOfWork = Depends(get_uow),
    config: MatchingConfig = Depends(get_matching_config)
):
    """
    Apply for a job.

    The student must be approved for placement and their effective
    (evaluation based) score must reach the job minimum.
    """
    result = ApplicationService(uow, config).apply(body.student_id, job_id)

    return ApplyResponse(
        success=True,
        job_id=result.job_id,
        student_id=result.student_id,
        match_score=result.match_score,
        effective_score=result.effective_score
    )


@router.put("/{job_id}/applicants/{student_id}", response_model=ApplicantResponse)
def update_applicant_status(
    job_id: uuid.UUID,
    student_id: uuid.UUID,
    body: ApplicantStatusUpdate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Shortlist, select or reject an applicant."""
    applicant = ApplicationService(uow).update_applicant_status(job_id, student_id, body.status)

    return ApplicantResponse(
        success=True,
        job_id=applicant.job_id,
        student_id=applicant.student_id,
        status=applicant.status,
        match_score=applicant.match_score
    )


@router.post("/{job_id}/shortlist", response_model=ShortlistResponse)
def shortlist_candidates(
    job_id: uuid.UUID,
    body: ShortlistRequest,
    uow: UnitOfWork = Depends(get_uow),
    config: MatchingConfig = Depends(get_matching_config)
):
    """
    Shortlist students for an open job.

    Students who have not applied are added as applicants with their
    current match score.
    """
    applicants = ApplicationService(uow, config).shortlist(job_id, body.student_ids)

    return ShortlistResponse(
        success=True,
        job_id=job_id,
        count=len(applicants),
        applicants=[ApplicantSummary.model_validate(a) for a in applicants]
    )
