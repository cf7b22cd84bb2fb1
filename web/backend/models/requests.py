#!/usr/bin/env python3
"""
Request models for API endpoints.

Acting trainer/coordinator ids travel in the body or query string since
authentication lives outside this service.
"""

import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ApplyRequest(BaseModel):
    """Request to apply for a job."""
    student_id: uuid.UUID


class ApplicantStatusUpdate(BaseModel):
    """Request to move an applicant along the hiring pipeline."""
    status: str = Field(..., description="applied, shortlisted, interviewed, selected or rejected")


class PlacementRequestCreate(BaseModel):
    """Trainer request to move a student into the placement pool."""
    student_id: uuid.UUID
    trainer_id: uuid.UUID


class PlacementReview(BaseModel):
    """Coordinator decision on a pending placement request."""
    remarks: Optional[str] = Field(None, max_length=1000)


class AddTestRequest(BaseModel):
    """Test result to append to a student profile."""
    title: str = Field(..., min_length=1)
    date: datetime
    score: float = Field(ge=0)
    max_score: float = Field(default=100, ge=1)
    subject_breakdown: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Per-subject marks, e.g. [{\"subject\": \"maths\", \"marks\": 40}]"
    )
    added_by: Optional[uuid.UUID] = None


class RemarkCreate(BaseModel):
    """Trainer remark with a 1-5 rating."""
    trainer_id: uuid.UUID
    remark: str = Field(..., min_length=1)
    rating: int = Field(ge=1, le=5)
    date: Optional[datetime] = None


class SkillItem(BaseModel):
    name: str = Field(..., min_length=1)
    level: int = Field(ge=0, le=100)
    tags: List[str] = Field(default_factory=list)


class SkillsUpdate(BaseModel):
    """Replacement skill list."""
    skills: List[SkillItem]


class ApprovalUpdate(BaseModel):
    """Trainer sign-off on a student assigned to them."""
    trainer_id: uuid.UUID
    status: str = Field(..., description="approved or rejected")


class EvaluationCreate(BaseModel):
    """Periodic evaluation; re-recording the same period overwrites it."""
    trainer_id: uuid.UUID
    type: str = Field(..., description="aptitude, logical, machine or spring_meet")
    score: float = Field(ge=0)
    max_score: Optional[float] = Field(None, ge=1)
    recorded_date: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)


class PlaceStudent(BaseModel):
    """Placement outcome for an approved student."""
    company: str = Field(..., min_length=1, max_length=200)
    position: Optional[str] = Field(None, max_length=200)
    salary: Optional[float] = Field(None, ge=0)
    placed_date: Optional[datetime] = None


class RemoveFromPlacement(BaseModel):
    remarks: Optional[str] = Field(None, max_length=1000)


class ShortlistRequest(BaseModel):
    """Students to shortlist for a job, usually taken from its ranking."""
    student_ids: List[uuid.UUID] = Field(..., min_length=1)
