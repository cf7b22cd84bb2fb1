#!/usr/bin/env python3
"""
Eligibility Module - placement lifecycle and the placement request workflow.

Only approved students are placement eligible; they alone may apply to
jobs or appear in candidate rankings.

Modules:

- states.py: Status names and allowed transitions
- workflow.py: PlacementWorkflow (request, approve, reject, cancel, place, remove)
"""

from core.eligibility.states import (
    NOT_REQUESTED,
    PENDING,
    APPROVED,
    REJECTED,
    PLACED,
    REMOVED,
    can_transition,
    assert_transition,
)
from core.eligibility.workflow import PlacementWorkflow, apply_placement_status

__all__ = [
    'NOT_REQUESTED',
    'PENDING',
    'APPROVED',
    'REJECTED',
    'PLACED',
    'REMOVED',
    'can_transition',
    'assert_transition',
    'PlacementWorkflow',
    'apply_placement_status',
]
