#!/usr/bin/env python3
"""
Tests for student profile mutations and aggregate upkeep.
"""

import uuid
import pytest

from core.students import StudentProfileService
from core.exceptions import StudentNotFoundException, InvalidStateException, ValidationException
from tests import days_ago, make_student


@pytest.fixture
def student(db_session):
    return make_student(db_session, tests=[(90, 100, days_ago(20))])


class TestAddTest:

    def test_recomputes_aggregate(self, uow, student):
        StudentProfileService(uow).add_test(student.id, 'Mock 2', days_ago(1), 35, 50)

        # tests mean (90 + 70) / 2 = 80, no remarks
        assert student.aggregate_score == 56
        assert len(student.tests) == 2
        assert student.tests[-1].subject_breakdown == []

    def test_keeps_subject_breakdown(self, uow, student):
        breakdown = [{'subject': 'Quant', 'score': 20, 'max_score': 25}]
        StudentProfileService(uow).add_test(student.id, 'Mock 2', days_ago(1), 20, 25, subject_breakdown=breakdown)
        assert student.tests[-1].subject_breakdown == breakdown

    def test_negative_score(self, uow, student):
        with pytest.raises(ValidationException):
            StudentProfileService(uow).add_test(student.id, 'Mock', days_ago(1), -5)

    def test_zero_max_score(self, uow, student):
        with pytest.raises(ValidationException):
            StudentProfileService(uow).add_test(student.id, 'Mock', days_ago(1), 5, 0)

    def test_unknown_student(self, uow):
        with pytest.raises(StudentNotFoundException):
            StudentProfileService(uow).add_test(uuid.uuid4(), 'Mock', days_ago(1), 5)


class TestTrainerRemarks:

    def test_rating_feeds_aggregate(self, uow, student):
        StudentProfileService(uow).add_trainer_remark(student.id, student.trainer_id, 'Solid', 5, days_ago(1))

        # 0.7 * 90 + 0.3 * 100
        assert student.aggregate_score == 93
        assert student.trainer_remarks[0].rating == 5

    @pytest.mark.parametrize('rating', [0, 6])
    def test_rating_range(self, uow, student, rating):
        with pytest.raises(ValidationException):
            StudentProfileService(uow).add_trainer_remark(student.id, student.trainer_id, 'Hmm', rating)


class TestSkills:

    def test_replaces_skill_list(self, uow, db_session):
        student = make_student(db_session, skills=[('Java', 40)])

        StudentProfileService(uow).update_skills(student.id, [
            {'name': 'Python', 'level': 80, 'tags': ['backend']},
            {'name': 'SQL', 'level': 60},
        ])

        assert sorted(s.name for s in student.skills) == ['Python', 'SQL']
        assert student.skills[0].tags == ['backend']
        assert student.skills[1].tags == []

    @pytest.mark.parametrize('skill', [{'name': 'Python', 'level': 101}, {'name': '', 'level': 50}, {'name': 'Go'}])
    def test_invalid_skill(self, uow, student, skill):
        with pytest.raises(ValidationException):
            StudentProfileService(uow).update_skills(student.id, [skill])


class TestApprovalStatus:

    def test_trainer_approves(self, uow, db_session):
        student = make_student(db_session, approval_status='pending')
        StudentProfileService(uow).set_approval_status(student.id, student.trainer_id, 'approved')
        assert student.approval_status == 'approved'

    def test_other_trainer(self, uow, student):
        with pytest.raises(InvalidStateException):
            StudentProfileService(uow).set_approval_status(student.id, uuid.uuid4(), 'rejected')

    def test_invalid_status(self, uow, student):
        with pytest.raises(ValidationException):
            StudentProfileService(uow).set_approval_status(student.id, student.trainer_id, 'pending')


class TestRecompute:

    def test_recompute_all_counts_changes(self, uow, db_session):
        stale = make_student(db_session, tests=[(50, 100, days_ago(3))], aggregate_score=0)
        fresh = make_student(db_session, aggregate_score=0)
        wrong_flag = make_student(db_session, placement_status='approved', placement_eligible=False)

        changed = StudentProfileService(uow).recompute_all()

        assert changed == 2
        assert stale.aggregate_score == 35
        assert fresh.aggregate_score == 0
        assert wrong_flag.placement_eligible is True

    def test_recompute_is_idempotent(self, uow, student):
        service = StudentProfileService(uow)
        service.recompute(student.id)
        assert service.recompute_all() == 0
