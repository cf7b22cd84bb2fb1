"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For row factories, see tests/__init__.py
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base
from database.uow import UnitOfWork


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def engine():
    """
    Function-scoped in-memory SQLite engine with the full schema.

    StaticPool keeps a single connection so every session (including the
    ones the web layer opens per request) sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def uow(db_session):
    return UnitOfWork(db_session)
