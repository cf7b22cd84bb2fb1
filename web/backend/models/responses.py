#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class StudentSummary(BaseModel):
    """Placement-relevant view of a student profile."""
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "roll_no": "CS-2025-014",
                "full_name": "Asha Rao",
                "program": "MCA",
                "batch": "2025",
                "approval_status": "approved",
                "aggregate_score": 87,
                "placement_status": "approved",
                "placement_eligible": True
            }
        }
    )

    id: uuid.UUID
    roll_no: str
    full_name: Optional[str] = None
    program: str
    batch: str
    trainer_id: Optional[uuid.UUID] = None
    approval_status: str
    aggregate_score: int = Field(ge=0, le=100)
    placement_status: str
    placement_eligible: bool
    placement_admin_remarks: Optional[str] = None
    placement_reviewed_at: Optional[datetime] = None
    placed_company: Optional[str] = None
    placed_position: Optional[str] = None
    placed_salary: Optional[float] = None
    placed_date: Optional[datetime] = None


class StudentResponse(BaseModel):
    success: bool
    student: StudentSummary


class Candidate(BaseModel):
    """One ranked candidate for a job."""
    student: StudentSummary
    match_score: int = Field(ge=0, le=100)
    explanation: Optional[Dict[str, Any]] = None


class MatchesResponse(BaseModel):
    """Ranked candidates for a job, best first."""
    success: bool
    job_id: uuid.UUID
    count: int
    candidates: List[Candidate]


class MatchExplanationResponse(BaseModel):
    """Score breakdown for one student against one job."""
    success: bool
    job_id: uuid.UUID
    student_id: uuid.UUID
    total_score: int = Field(ge=0, le=100)
    explanation: Dict[str, Any]


class ApplyResponse(BaseModel):
    success: bool
    message: str = "Application submitted successfully"
    job_id: uuid.UUID
    student_id: uuid.UUID
    match_score: int
    effective_score: float


class ApplicantResponse(BaseModel):
    success: bool
    job_id: uuid.UUID
    student_id: uuid.UUID
    status: str
    match_score: int


class ApplicantSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: uuid.UUID
    status: str
    match_score: int


class ShortlistResponse(BaseModel):
    """Applicant entries after a shortlist, in request order."""
    success: bool
    job_id: uuid.UUID
    count: int
    applicants: List[ApplicantSummary]


class PlacementRequestSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    student_id: uuid.UUID
    trainer_id: uuid.UUID
    avg_score: Optional[float] = None
    status: str
    admin_remarks: Optional[str] = None
    requested_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None


class PlacementRequestResponse(BaseModel):
    success: bool
    request: PlacementRequestSummary


class PlacementRequestsResponse(BaseModel):
    """Coordinator listing, newest first."""
    success: bool
    count: int
    requests: List[PlacementRequestSummary]


class CancelResponse(BaseModel):
    success: bool
    cancelled: bool


class EvaluationSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    student_id: uuid.UUID
    trainer_id: uuid.UUID
    type: str
    frequency: str
    recorded_date: datetime
    period_start: datetime
    period_end: datetime
    period_label: str
    score: float
    max_score: float
    notes: Optional[str] = None


class EvaluationResponse(BaseModel):
    success: bool
    evaluation: EvaluationSummary


class EffectiveScoreResponse(BaseModel):
    """Evaluation based score next to the persisted aggregate."""
    success: bool
    student_id: uuid.UUID
    effective_score: float
    aggregate_score: int
    monthly_averages: Dict[str, float] = Field(default_factory=dict)
    type_averages: Dict[str, Optional[float]] = Field(default_factory=dict)


class JobListing(BaseModel):
    """An open job as seen by one student."""
    job_id: uuid.UUID
    title: str
    company_name: str
    location: Optional[str] = None
    job_type: Optional[str] = None
    positions: Optional[int] = None
    min_aggregate_score: int
    deadline: Optional[datetime] = None
    match_score: int = Field(ge=0, le=100)
    has_applied: bool
    application_status: Optional[str] = None
    applied_at: Optional[datetime] = None


class StudentJobsResponse(BaseModel):
    success: bool
    count: int
    jobs: List[JobListing]


class HealthResponse(BaseModel):
    status: str
    service: str
