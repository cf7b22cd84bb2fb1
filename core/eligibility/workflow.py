#!/usr/bin/env python3
"""
Placement Workflow - trainer requests, coordinator decisions, outcomes.

Every method mutates the placement request and the student profile through
the same UnitOfWork, so the caller's placement_uow() commits both or
neither. Student rows are loaded FOR UPDATE where the database supports it.
"""

from datetime import datetime
from typing import Any, List, Optional
import logging

from sqlalchemy.exc import IntegrityError

from database.models import PlacementRequest, StudentProfile
from database.repositories.base import as_uuid
from database.uow import UnitOfWork
from core.exceptions import (
    StudentNotFoundException,
    PlacementRequestNotFoundException,
    InvalidStateException,
    ConflictException,
)
from core.eligibility import states
from core.evaluations import average_percentage
from core.scorer.aggregate import apply_aggregate_score
from core.utils import as_utc, utc_now

logger = logging.getLogger(__name__)


def apply_placement_status(
    student: StudentProfile,
    status: str,
    remarks: str = '',
    reviewed_at: Optional[datetime] = None
) -> None:
    """Set the placement fields and recompute the derived ones in one step."""
    student.placement_status = status
    student.placement_admin_remarks = remarks or ''
    student.placement_reviewed_at = reviewed_at
    apply_aggregate_score(student)


class PlacementWorkflow:
    """
    State machine over StudentProfile.placement_status and PlacementRequest.

    Errors:
    - NotFound: student or request missing
    - InvalidState: not owned, not approved by trainer, wrong status
    - Conflict: a pending request already exists
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _flush(self, what: str) -> None:
        try:
            self.uow.flush()
        except IntegrityError as e:
            logger.warning(f"Conflict while writing {what}: {e.orig}")
            raise ConflictException(f"Concurrent update rejected for {what}") from e

    def _student(self, student_id: Any) -> StudentProfile:
        student = self.uow.students.get_by_id(student_id, for_update=True)
        if student is None:
            raise StudentNotFoundException(f"Student {student_id} not found")
        return student

    def _owned_student(self, student_id: Any, trainer_id: Any) -> StudentProfile:
        student = self._student(student_id)
        if student.trainer_id != as_uuid(trainer_id):
            logger.warning(f"Trainer {trainer_id} is not assigned to student {student_id}")
            raise InvalidStateException(f"Student {student_id} is not assigned to trainer {trainer_id}")
        return student

    def _pending_request(self, request_id: Any) -> PlacementRequest:
        request = self.uow.placement_requests.get_by_id(request_id, for_update=True)
        if request is None:
            raise PlacementRequestNotFoundException(f"Placement request {request_id} not found")
        if request.status != states.REQUEST_PENDING:
            raise InvalidStateException(
                f"Placement request {request_id} is '{request.status}'; only pending requests can be reviewed"
            )
        return request

    def request_placement(self, student_id: Any, trainer_id: Any) -> PlacementRequest:
        """Trainer asks for a student to enter the placement pool.

        Args:
            student_id: Student profile ID
            trainer_id: The requesting trainer; must own the student

        Returns:
            The new pending PlacementRequest with avg_score snapshot

        Raises:
            StudentNotFoundException: Student does not exist
            InvalidStateException: Not owned, not trainer-approved, or
                already approved/placed
            ConflictException: A pending request already exists
        """
        student = self._owned_student(student_id, trainer_id)

        if student.approval_status != 'approved':
            raise InvalidStateException(f"Student {student_id} has not been approved by their trainer")

        if student.placement_status in (states.APPROVED, states.PLACED):
            raise InvalidStateException(f"Student {student_id} is already approved for placement")

        if self.uow.placement_requests.get_pending_for_student(student.id) is not None:
            logger.warning(f"Duplicate placement request for student {student_id}")
            raise ConflictException(f"A placement request is already pending for student {student_id}")

        states.assert_transition(student.placement_status, states.PENDING)

        avg_score = average_percentage(self.uow.evaluations.list_for_student(student.id, trainer_id=trainer_id))

        request = self.uow.placement_requests.add(PlacementRequest(
            student_id=student.id,
            trainer_id=as_uuid(trainer_id),
            avg_score=avg_score,
            status=states.REQUEST_PENDING,
            admin_remarks='',
            requested_at=utc_now(),
        ))
        apply_placement_status(student, states.PENDING)
        self._flush(f"placement request for student {student_id}")

        logger.info(f"Placement requested for student {student.id} by trainer {trainer_id} (avg_score={avg_score})")
        return request

    def _review(self, request_id: Any, request_status: str, student_status: str, remarks: Optional[str]) -> PlacementRequest:
        request = self._pending_request(request_id)
        reviewed_at = utc_now()

        request.status = request_status
        request.reviewed_at = reviewed_at
        request.admin_remarks = remarks or ''

        student = self.uow.students.get_by_id(request.student_id, for_update=True)
        if student is not None:
            apply_placement_status(student, student_status, request.admin_remarks, reviewed_at)
        else:
            logger.warning(f"Placement request {request_id} refers to missing student {request.student_id}")

        self._flush(f"placement request {request_id}")
        logger.info(f"Placement request {request_id} {request_status}")
        return request

    def approve(self, request_id: Any, remarks: Optional[str] = None) -> PlacementRequest:
        """Coordinator approves a pending request; the student becomes eligible."""
        return self._review(request_id, states.REQUEST_APPROVED, states.APPROVED, remarks)

    def reject(self, request_id: Any, remarks: Optional[str] = None) -> PlacementRequest:
        """Coordinator rejects a pending request."""
        return self._review(request_id, states.REQUEST_REJECTED, states.REJECTED, remarks)

    def _cancel(self, request: PlacementRequest) -> None:
        student = self.uow.students.get_by_id(request.student_id, for_update=True)
        self.uow.placement_requests.delete(request)
        if student is not None:
            apply_placement_status(student, states.NOT_REQUESTED)
        self._flush(f"cancellation of placement request {request.id}")
        logger.info(f"Placement request {request.id} cancelled by trainer {request.trainer_id}")

    def cancel(self, request_id: Any, trainer_id: Any) -> None:
        """Trainer withdraws their own pending request."""
        request = self._pending_request(request_id)
        if request.trainer_id != as_uuid(trainer_id):
            logger.warning(f"Trainer {trainer_id} tried to cancel request {request_id} raised by {request.trainer_id}")
            raise InvalidStateException(f"Placement request {request_id} was not raised by trainer {trainer_id}")
        self._cancel(request)

    def cancel_for_student(self, student_id: Any, trainer_id: Any) -> None:
        """Trainer withdraws the pending request they raised for a student."""
        student = self._owned_student(student_id, trainer_id)
        request = self.uow.placement_requests.get_pending_for_student(student.id, trainer_id=trainer_id)
        if request is None:
            raise InvalidStateException(f"No pending placement request found for student {student_id}")
        self._cancel(request)

    def mark_placed(
        self,
        student_id: Any,
        company: str,
        position: Optional[str] = None,
        salary: Optional[float] = None,
        placed_date: Optional[datetime] = None
    ) -> StudentProfile:
        """Record a placement outcome. Only approved students can be placed."""
        student = self._student(student_id)
        if student.placement_status != states.APPROVED:
            raise InvalidStateException(f"Only approved students can be placed (student {student_id} is '{student.placement_status}')")

        placed_date = as_utc(placed_date) if placed_date else utc_now()
        student.placed_company = company
        student.placed_position = position
        student.placed_salary = salary
        student.placed_date = placed_date
        apply_placement_status(student, states.PLACED, student.placement_admin_remarks, placed_date)
        self._flush(f"placement of student {student_id}")

        logger.info(f"Student {student.id} placed at {company}")
        return student

    def mark_removed(self, student_id: Any, remarks: Optional[str] = None) -> StudentProfile:
        """Take an approved student out of the placement pool."""
        student = self._student(student_id)
        if student.placement_status != states.APPROVED:
            raise InvalidStateException(
                f"Only approved students can be removed from placement (student {student_id} is '{student.placement_status}')"
            )

        apply_placement_status(student, states.REMOVED, remarks, utc_now())
        self._flush(f"removal of student {student_id}")

        logger.info(f"Student {student.id} removed from placement")
        return student

    def list_requests(self, status: Optional[str] = states.REQUEST_PENDING) -> List[PlacementRequest]:
        """Coordinator listing, newest first. status='all' lists everything."""
        return self.uow.placement_requests.list_by_status(status)
