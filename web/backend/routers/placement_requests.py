#!/usr/bin/env python3
"""
Placement request endpoints - trainer requests and coordinator review.
"""

import uuid
import logging
from fastapi import APIRouter, Depends, Query

from core.eligibility import PlacementWorkflow
from database.uow import UnitOfWork
from ..dependencies import get_uow
from ..models.requests import PlacementRequestCreate, PlacementReview
from ..models.responses import (
    PlacementRequestSummary,
    PlacementRequestResponse,
    PlacementRequestsResponse,
    CancelResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/placement-requests", tags=["placement-requests"])


@router.post("", response_model=PlacementRequestResponse, status_code=201)
def create_placement_request(
    body: PlacementRequestCreate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Trainer requests placement for a student assigned to them."""
    request = PlacementWorkflow(uow).request_placement(body.student_id, body.trainer_id)
    return PlacementRequestResponse(success=True, request=PlacementRequestSummary.model_validate(request))


@router.get("", response_model=PlacementRequestsResponse)
def list_placement_requests(
    status: str = Query(default="pending", description="pending, approved, rejected or all"),
    uow: UnitOfWork = Depends(get_uow)
):
    """Coordinator listing of placement requests, newest first."""
    requests = PlacementWorkflow(uow).list_requests(status)
    return PlacementRequestsResponse(
        success=True,
        count=len(requests),
        requests=[PlacementRequestSummary.model_validate(r) for r in requests]
    )


@router.put("/{request_id}/approve", response_model=PlacementRequestResponse)
def approve_placement_request(
    request_id: uuid.UUID,
    body: PlacementReview = PlacementReview(),
    uow: UnitOfWork = Depends(get_uow)
):
    """Coordinator approves a pending request."""
    request = PlacementWorkflow(uow).approve(request_id, body.remarks)
    return PlacementRequestResponse(success=True, request=PlacementRequestSummary.model_validate(request))


@router.put("/{request_id}/reject", response_model=PlacementRequestResponse)
def reject_placement_request(
    request_id: uuid.UUID,
    body: PlacementReview = PlacementReview(),
    uow: UnitOfWork = Depends(get_uow)
):
    """Coordinator rejects a pending request."""
    request = PlacementWorkflow(uow).reject(request_id, body.remarks)
    return PlacementRequestResponse(success=True, request=PlacementRequestSummary.model_validate(request))


@router.delete("/{request_id}", response_model=CancelResponse)
def cancel_placement_request(
    request_id: uuid.UUID,
    trainer_id: uuid.UUID = Query(..., description="Trainer who raised the request"),
    uow: UnitOfWork = Depends(get_uow)
):
    """Trainer withdraws a pending request they raised."""
    PlacementWorkflow(uow).cancel(request_id, trainer_id)
    return CancelResponse(success=True, cancelled=True)
