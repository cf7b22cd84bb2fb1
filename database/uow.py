import contextlib
import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from database.repositories import (
    StudentRepository,
    JobRepository,
    EvaluationRepository,
    PlacementRequestRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Repositories sharing one Session, hence one transaction.

    Compound transitions (placement request + student profile, application
    + job applicant) mutate several records through these repositories and
    become visible together when the surrounding scope commits.
    """

    def __init__(self, session: Session):
        self.session = session
        self.students = StudentRepository(session)
        self.jobs = JobRepository(session)
        self.evaluations = EvaluationRepository(session)
        self.placement_requests = PlacementRequestRepository(session)

    def flush(self) -> None:
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


@contextlib.contextmanager
def placement_uow(session_factory: Optional[Callable[[], Session]] = None):
    """Per-unit-of-work transaction scope.

    Yields a UnitOfWork bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with placement_uow() as uow:
            PlacementWorkflow(uow).approve(request_id, "Looks good")
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import SessionLocal
        session_factory = SessionLocal

    session = session_factory()
    try:
        uow = UnitOfWork(session)
        yield uow
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
