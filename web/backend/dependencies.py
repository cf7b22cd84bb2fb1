#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import get_config, MatchingConfig
from database.uow import UnitOfWork, placement_uow


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self, url: str):
        self.engine = create_engine(
            url,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=10,
            max_overflow=20
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(get_config().database.url)
    return _db_manager


def get_uow() -> Generator[UnitOfWork, None, None]:
    """
    FastAPI dependency that yields a unit of work.

    The transaction commits when the endpoint returns and rolls back if it
    raises, so a rejected transition leaves nothing behind.

    Usage:
        @router.put("/endpoint")
        def my_endpoint(uow: UnitOfWork = Depends(get_uow)):
            ...
    """
    with placement_uow(get_db_manager().SessionLocal) as uow:
        yield uow


def get_matching_config() -> MatchingConfig:
    """Matching configuration (weights, recency window, ranking limits)."""
    return get_config().matching
