#!/usr/bin/env python3
"""
Placement Scout - FastAPI Application

Candidate ranking, placement workflow and scoring inputs over HTTP, with
automatic API documentation.

Usage:
    python main.py serve

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI, HTTPException

from core.config_loader import get_config
from core.exceptions import ServiceException
from .exceptions import (
    service_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .models.responses import HealthResponse
from .routers import (
    jobs_router,
    placement_requests_router,
    students_router
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Scout API",
    description="Student-job matching and placement eligibility workflow",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Register exception handlers
app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(jobs_router)
app.include_router(placement_requests_router)
app.include_router(students_router)


@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", service="placement-scout")


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting Placement Scout API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
