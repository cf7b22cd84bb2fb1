#!/usr/bin/env python3
"""
Student endpoints - scoring inputs, evaluations, job board and placement outcome.
"""

import uuid
import logging
from fastapi import APIRouter, Depends

from core.applications import ApplicationService
from core.config_loader import MatchingConfig
from core.eligibility import PlacementWorkflow
from core.evaluations import EvaluationService
from core.students import StudentProfileService
from database.uow import UnitOfWork
from ..dependencies import get_uow, get_matching_config
from ..models.requests import (
    AddTestRequest,
    RemarkCreate,
    SkillsUpdate,
    ApprovalUpdate,
    EvaluationCreate,
    PlaceStudent,
    RemoveFromPlacement
)
from ..models.responses import (
    StudentSummary,
    StudentResponse,
    EvaluationSummary,
    EvaluationResponse,
    EffectiveScoreResponse,
    JobListing,
    StudentJobsResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/students", tags=["students"])


def _student_response(student) -> StudentResponse:
    return StudentResponse(success=True, student=StudentSummary.model_validate(student))


@router.post("/{student_id}/tests", response_model=StudentResponse, status_code=201)
def add_test(
    student_id: uuid.UUID,
    body: AddTestRequest,
    uow: UnitOfWork = Depends(get_uow)
):
    """Add a test result; the aggregate score is recomputed."""
    student = StudentProfileService(uow).add_test(
        student_id,
        title=body.title,
        date=body.date,
        score=body.score,
        max_score=body.max_score,
        subject_breakdown=body.subject_breakdown,
        added_by=body.added_by
    )
    return _student_response(student)


@router.post("/{student_id}/remarks", response_model=StudentResponse, status_code=201)
def add_remark(
    student_id: uuid.UUID,
    body: RemarkCreate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Add a rated trainer remark; the aggregate score is recomputed."""
    student = StudentProfileService(uow).add_trainer_remark(
        student_id,
        trainer_id=body.trainer_id,
        remark=body.remark,
        rating=body.rating,
        date=body.date
    )
    return _student_response(student)


@router.put("/{student_id}/skills", response_model=StudentResponse)
def update_skills(
    student_id: uuid.UUID,
    body: SkillsUpdate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Replace the student's skill list."""
    student = StudentProfileService(uow).update_skills(
        student_id,
        [skill.model_dump() for skill in body.skills]
    )
    return _student_response(student)


@router.put("/{student_id}/approval", response_model=StudentResponse)
def set_approval(
    student_id: uuid.UUID,
    body: ApprovalUpdate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Trainer approves or rejects a student assigned to them."""
    student = StudentProfileService(uow).set_approval_status(student_id, body.trainer_id, body.status)
    return _student_response(student)


@router.post("/{student_id}/evaluations", response_model=EvaluationResponse, status_code=201)
def record_evaluation(
    student_id: uuid.UUID,
    body: EvaluationCreate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Record (or overwrite) the evaluation for the period of recorded_date."""
    evaluation = EvaluationService(uow).record_evaluation(
        student_id,
        trainer_id=body.trainer_id,
        evaluation_type=body.type,
        score=body.score,
        max_score=body.max_score,
        recorded_date=body.recorded_date,
        notes=body.notes
    )
    return EvaluationResponse(success=True, evaluation=EvaluationSummary.model_validate(evaluation))


@router.get("/{student_id}/effective-score", response_model=EffectiveScoreResponse)
def get_effective_score(
    student_id: uuid.UUID,
    uow: UnitOfWork = Depends(get_uow)
):
    """
    Effective score checked when the student applies for a job, with the
    per-month and per-type averages it is built from.
    """
    summary = EvaluationService(uow).performance_summary(student_id)
    return EffectiveScoreResponse(
        success=True,
        student_id=student_id,
        effective_score=summary.effective_score,
        aggregate_score=summary.student.aggregate_score,
        monthly_averages=summary.monthly_averages,
        type_averages=summary.type_averages
    )


@router.get("/{student_id}/jobs", response_model=StudentJobsResponse)
def list_jobs(
    student_id: uuid.UUID,
    uow: UnitOfWork = Depends(get_uow),
    config: MatchingConfig = Depends(get_matching_config)
):
    """Open jobs the student qualifies for, with match score and apply state."""
    listings = ApplicationService(uow, config).list_jobs_for_student(student_id)

    return StudentJobsResponse(
        success=True,
        count=len(listings),
        jobs=[
            JobListing(
                job_id=listing.job.id,
                title=listing.job.title,
                company_name=listing.job.company_name,
                location=listing.job.location,
                job_type=listing.job.job_type,
                positions=listing.job.positions,
                min_aggregate_score=listing.job.min_aggregate_score,
                deadline=listing.job.deadline,
                match_score=listing.match_score,
                has_applied=listing.has_applied,
                application_status=listing.application_status,
                applied_at=listing.applied_at
            )
            for listing in listings
        ]
    )


@router.put("/{student_id}/place", response_model=StudentResponse)
def place_student(
    student_id: uuid.UUID,
    body: PlaceStudent,
    uow: UnitOfWork = Depends(get_uow)
):
    """Mark an approved student as placed."""
    student = PlacementWorkflow(uow).mark_placed(
        student_id,
        company=body.company,
        position=body.position,
        salary=body.salary,
        placed_date=body.placed_date
    )
    return _student_response(student)


@router.put("/{student_id}/remove-from-placement", response_model=StudentResponse)
def remove_from_placement(
    student_id: uuid.UUID,
    body: RemoveFromPlacement = RemoveFromPlacement(),
    uow: UnitOfWork = Depends(get_uow)
):
    """Take an approved student out of the placement pool."""
    student = PlacementWorkflow(uow).mark_removed(student_id, body.remarks)
    return _student_response(student)
