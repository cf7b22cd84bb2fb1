#!/usr/bin/env python3
"""
Error handlers for the web application.

Service exceptions come from core.exceptions and are mapped to HTTP codes:
NotFound -> 404, Conflict -> 409, InvalidState -> 400, Validation -> 422.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.exceptions import (
    ServiceException,
    NotFoundException,
    InvalidStateException,
    ConflictException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: ServiceException) -> int:
    if isinstance(exc, NotFoundException):
        return 404
    if isinstance(exc, ConflictException):
        return 409
    if isinstance(exc, InvalidStateException):
        return 400
    if isinstance(exc, ValidationException):
        return 422
    return 500


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({status_code}): {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
