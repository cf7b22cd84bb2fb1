#!/usr/bin/env python3
"""
Service layer exceptions.

Every error raised by a state transition or lookup derives from
ServiceException so callers (the web layer, the CLI) can surface it verbatim.
Scoring functions never raise these.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundException(ServiceException):
    """Raised when a referenced record does not exist."""
    pass


class StudentNotFoundException(NotFoundException):
    """Raised when a student profile is not found."""
    pass


class JobNotFoundException(NotFoundException):
    """Raised when a job posting is not found."""
    pass


class PlacementRequestNotFoundException(NotFoundException):
    """Raised when a placement request is not found."""
    pass


class InvalidStateException(ServiceException):
    """Raised when an operation is not allowed in the record's current state."""
    pass


class ConflictException(InvalidStateException):
    """Raised when a duplicate pending request or application is attempted."""
    pass


class ValidationException(ServiceException):
    """Raised when input values are rejected before any state is touched."""
    pass
