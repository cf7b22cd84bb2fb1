import math
import logging
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (86.5 -> 87, -2.5 -> -2).

    Built-in round() is banker's rounding (86.5 -> 86); persisted scores
    must use this instead.
    """
    return int(math.floor(float(value) + 0.5))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return a timezone-aware UTC datetime.

    Naive datetimes are assumed to already be in UTC (SQLite hands them back
    without tzinfo even for TIMESTAMP WITH TIME ZONE columns).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def safe_float(value: Any) -> Optional[float]:
    """Convert to float, returning None for missing or non-numeric values."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric value: {value!r}")
        return None
