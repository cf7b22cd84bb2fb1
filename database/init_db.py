import logging
from tenacity import retry, stop_after_attempt, wait_fixed

from database.models import Base

logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2), reraise=True)
def init_db(bind=None):
    """Create all tables that do not exist yet.

    Retried a few times so a freshly started database container has time
    to accept connections.
    """
    if bind is None:
        from database.database import engine
        bind = engine

    logger.info("Initializing database...")
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Tables created or verified.")
    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise
