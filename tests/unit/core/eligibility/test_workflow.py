#!/usr/bin/env python3
"""
Tests for the placement workflow state machine.
"""

import uuid
import pytest
from sqlalchemy.exc import IntegrityError

from core.eligibility import PlacementWorkflow, can_transition
from core.exceptions import (
    StudentNotFoundException,
    PlacementRequestNotFoundException,
    InvalidStateException,
    ConflictException,
)
from database.models import PlacementRequest
from database.uow import placement_uow
from tests import NOW, days_ago, make_student, make_evaluation


@pytest.fixture
def trainer_id():
    return uuid.uuid4()


@pytest.fixture
def student(db_session, trainer_id):
    return make_student(
        db_session,
        trainer_id=trainer_id,
        tests=[(80, 100, days_ago(3))],
        ratings=[(4, days_ago(2))],
    )


class TestTransitionTable:

    def test_allowed(self):
        assert can_transition('not_requested', 'pending')
        assert can_transition('pending', 'approved')
        assert can_transition('pending', 'not_requested')
        assert can_transition('approved', 'placed')
        assert can_transition('rejected', 'pending')

    def test_forbidden(self):
        assert not can_transition('placed', 'removed')
        assert not can_transition('not_requested', 'approved')
        assert not can_transition('removed', 'placed')
        assert not can_transition('pending', 'placed')


class TestRequestPlacement:

    def test_creates_pending_request(self, uow, student, trainer_id):
        request = PlacementWorkflow(uow).request_placement(student.id, trainer_id)

        assert request.status == 'pending'
        assert request.trainer_id == trainer_id
        assert request.avg_score is None
        assert student.placement_status == 'pending'
        assert student.placement_eligible is False
        assert student.placement_admin_remarks == ''
        assert student.placement_reviewed_at is None
        assert student.aggregate_score == 79

    def test_avg_score_uses_only_this_trainers_evaluations(self, uow, db_session, student, trainer_id):
        make_evaluation(db_session, student, 20, 25, trainer_id=trainer_id, evaluation_type='aptitude')
        make_evaluation(db_session, student, 60, 100, trainer_id=trainer_id, period_start=days_ago(40))
        make_evaluation(db_session, student, 0, 100, trainer_id=uuid.uuid4())

        request = PlacementWorkflow(uow).request_placement(student.id, trainer_id)

        assert request.avg_score == pytest.approx(70.0)

    def test_unknown_student(self, uow, trainer_id):
        with pytest.raises(StudentNotFoundException):
            PlacementWorkflow(uow).request_placement(uuid.uuid4(), trainer_id)

    def test_other_trainers_student(self, uow, student):
        with pytest.raises(InvalidStateException):
            PlacementWorkflow(uow).request_placement(student.id, uuid.uuid4())

    def test_student_not_approved_by_trainer(self, uow, db_session, trainer_id):
        pending = make_student(db_session, trainer_id=trainer_id, approval_status='pending')
        with pytest.raises(InvalidStateException):
            PlacementWorkflow(uow).request_placement(pending.id, trainer_id)

    @pytest.mark.parametrize('status', ['approved', 'placed'])
    def test_already_in_pool(self, uow, db_session, trainer_id, status):
        s = make_student(db_session, trainer_id=trainer_id, placement_status=status)
        with pytest.raises(InvalidStateException):
            PlacementWorkflow(uow).request_placement(s.id, trainer_id)

    def test_second_pending_request_conflicts(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        workflow.request_placement(student.id, trainer_id)

        with pytest.raises(ConflictException):
            workflow.request_placement(student.id, trainer_id)

        assert len(workflow.list_requests()) == 1

    def test_rejected_student_can_be_requested_again(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        first = workflow.request_placement(student.id, trainer_id)
        workflow.reject(first.id, 'Needs more practice')

        second = workflow.request_placement(student.id, trainer_id)

        assert second.id != first.id
        assert student.placement_status == 'pending'

    def test_partial_index_blocks_concurrent_pending_rows(self, db_session, student, trainer_id):
        db_session.add(PlacementRequest(student_id=student.id, trainer_id=trainer_id, status='pending'))
        db_session.flush()
        db_session.add(PlacementRequest(student_id=student.id, trainer_id=trainer_id, status='pending'))
        with pytest.raises(IntegrityError):
            db_session.flush()


class TestReview:

    def test_approve(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        request = workflow.request_placement(student.id, trainer_id)

        approved = workflow.approve(request.id, 'Ready')

        assert approved.status == 'approved'
        assert approved.admin_remarks == 'Ready'
        assert approved.reviewed_at is not None
        assert student.placement_status == 'approved'
        assert student.placement_eligible is True
        assert student.placement_admin_remarks == 'Ready'
        assert student.placement_reviewed_at == approved.reviewed_at

    def test_reject(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        request = workflow.request_placement(student.id, trainer_id)

        rejected = workflow.reject(request.id)

        assert rejected.status == 'rejected'
        assert rejected.admin_remarks == ''
        assert student.placement_status == 'rejected'
        assert student.placement_eligible is False

    def test_only_pending_can_be_reviewed(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        request = workflow.request_placement(student.id, trainer_id)
        workflow.approve(request.id)

        with pytest.raises(InvalidStateException):
            workflow.reject(request.id)

    def test_unknown_request(self, uow):
        with pytest.raises(PlacementRequestNotFoundException):
            PlacementWorkflow(uow).approve(uuid.uuid4())


class TestCancel:

    def test_cancel_deletes_request_and_resets_student(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        request = workflow.request_placement(student.id, trainer_id)

        workflow.cancel(request.id, trainer_id)

        assert uow.placement_requests.get_by_id(request.id) is None
        assert student.placement_status == 'not_requested'
        assert student.placement_eligible is False

    def test_cancel_by_other_trainer(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        request = workflow.request_placement(student.id, trainer_id)

        with pytest.raises(InvalidStateException):
            workflow.cancel(request.id, uuid.uuid4())
        assert student.placement_status == 'pending'

    def test_cancel_reviewed_request(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        request = workflow.request_placement(student.id, trainer_id)
        workflow.approve(request.id)

        with pytest.raises(InvalidStateException):
            workflow.cancel(request.id, trainer_id)

    def test_cancel_for_student(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        workflow.request_placement(student.id, trainer_id)

        workflow.cancel_for_student(student.id, trainer_id)

        assert workflow.list_requests('all') == []
        assert student.placement_status == 'not_requested'

    def test_cancel_for_student_without_pending_request(self, uow, student, trainer_id):
        with pytest.raises(InvalidStateException):
            PlacementWorkflow(uow).cancel_for_student(student.id, trainer_id)


class TestOutcome:

    def _approved(self, uow, student, trainer_id):
        workflow = PlacementWorkflow(uow)
        workflow.approve(workflow.request_placement(student.id, trainer_id).id)
        return workflow

    def test_mark_placed(self, uow, student, trainer_id):
        workflow = self._approved(uow, student, trainer_id)

        workflow.mark_placed(student.id, 'Acme Corp', 'Engineer', 600000, NOW)

        assert student.placement_status == 'placed'
        assert student.placement_eligible is True
        assert student.placed_company == 'Acme Corp'
        assert student.placed_salary == 600000
        assert student.placed_date == NOW

    def test_mark_placed_requires_approval(self, uow, student):
        with pytest.raises(InvalidStateException):
            PlacementWorkflow(uow).mark_placed(student.id, 'Acme Corp')

    def test_mark_removed(self, uow, student, trainer_id):
        workflow = self._approved(uow, student, trainer_id)

        workflow.mark_removed(student.id, 'Left the program')

        assert student.placement_status == 'removed'
        assert student.placement_eligible is False
        assert student.placement_admin_remarks == 'Left the program'

    def test_placed_students_cannot_be_removed(self, uow, student, trainer_id):
        workflow = self._approved(uow, student, trainer_id)
        workflow.mark_placed(student.id, 'Acme Corp')

        with pytest.raises(InvalidStateException):
            workflow.mark_removed(student.id)


class TestListRequests:

    def test_filter_and_order(self, uow, db_session, trainer_id):
        workflow = PlacementWorkflow(uow)
        students = [make_student(db_session, trainer_id=trainer_id) for _ in range(3)]
        requests = [workflow.request_placement(s.id, trainer_id) for s in students]
        for offset, request in enumerate(requests):
            request.requested_at = days_ago(10 - offset)
        workflow.approve(requests[0].id)
        db_session.flush()

        pending = workflow.list_requests()
        everything = workflow.list_requests('all')

        assert [r.id for r in pending] == [requests[2].id, requests[1].id]
        assert [r.id for r in everything] == [requests[2].id, requests[1].id, requests[0].id]
        assert [r.id for r in workflow.list_requests('approved')] == [requests[0].id]


class TestTransactionScope:

    def test_failed_transition_rolls_back(self, session_factory, trainer_id):
        setup = session_factory()
        s = make_student(setup, trainer_id=trainer_id)
        setup.commit()
        student_id = s.id
        setup.close()

        with pytest.raises(ConflictException):
            with placement_uow(session_factory) as uow:
                workflow = PlacementWorkflow(uow)
                workflow.request_placement(student_id, trainer_id)
                workflow.request_placement(student_id, trainer_id)

        with placement_uow(session_factory) as uow:
            assert uow.students.get_by_id(student_id).placement_status == 'not_requested'
            assert uow.placement_requests.list_by_status('all') == []

    def test_successful_transition_commits(self, session_factory, trainer_id):
        setup = session_factory()
        s = make_student(setup, trainer_id=trainer_id)
        setup.commit()
        student_id = s.id
        setup.close()

        with placement_uow(session_factory) as uow:
            PlacementWorkflow(uow).request_placement(student_id, trainer_id)

        with placement_uow(session_factory) as uow:
            assert uow.students.get_by_id(student_id).placement_status == 'pending'
            assert len(uow.placement_requests.list_by_status()) == 1
