"""API route handlers."""

from .jobs import router as jobs_router
from .placement_requests import router as placement_requests_router
from .students import router as students_router
