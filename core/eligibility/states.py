#!/usr/bin/env python3
"""
Placement lifecycle states.

    not_requested -> pending -> approved -> placed
                             +-> rejected   +-> removed
    pending -> not_requested  (trainer cancels)

rejected and removed students may be requested again; placed is terminal.
"""

from typing import Dict, FrozenSet

from core.exceptions import InvalidStateException

NOT_REQUESTED = 'not_requested'
PENDING = 'pending'
APPROVED = 'approved'
REJECTED = 'rejected'
PLACED = 'placed'
REMOVED = 'removed'

PLACEMENT_STATUSES = (NOT_REQUESTED, PENDING, APPROVED, REJECTED, PLACED, REMOVED)

REQUEST_PENDING = 'pending'
REQUEST_APPROVED = 'approved'
REQUEST_REJECTED = 'rejected'

REQUEST_STATUSES = (REQUEST_PENDING, REQUEST_APPROVED, REQUEST_REJECTED)

TRANSITIONS: Dict[str, FrozenSet[str]] = {
    NOT_REQUESTED: frozenset({PENDING}),
    PENDING: frozenset({APPROVED, REJECTED, NOT_REQUESTED}),
    APPROVED: frozenset({PLACED, REMOVED}),
    REJECTED: frozenset({PENDING}),
    REMOVED: frozenset({PENDING}),
    PLACED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current or NOT_REQUESTED, frozenset())


def assert_transition(current: str, target: str) -> None:
    """Raise InvalidStateException unless current -> target is allowed."""
    if not can_transition(current, target):
        raise InvalidStateException(f"Cannot move placement status from '{current}' to '{target}'")
