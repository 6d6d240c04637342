"""
Centralized date and time utilities for the application.

Trip start dates arrive from clients as ISO 8601 strings (often without a
timezone, e.g. ``"2026-05-01T08:00"``); GPS update stamps are stored as epoch
milliseconds. This module converts between those and timezone-aware
datetimes, defaulting naive values to UTC.
"""

import logging
from datetime import UTC, datetime

from dateutil import parser

logger = logging.getLogger(__name__)


def get_current_utc_time() -> datetime:
    """Return the current time as a timezone-aware datetime object in UTC."""
    return datetime.now(UTC)


def parse_timestamp(ts: str | datetime | None) -> datetime | None:
    """
    Parse a timestamp string (or datetime object) and ensure it is
    timezone-aware, defaulting to UTC.

    Args:
        ts: The timestamp to parse, either as an ISO 8601 string or a
            datetime object.

    Returns:
        A timezone-aware datetime object, or None if parsing fails.
    """
    if not ts:
        return None

    if isinstance(ts, datetime):
        if ts.tzinfo is None:
            return ts.replace(tzinfo=UTC)
        return ts

    try:
        parsed_time = parser.isoparse(ts)
    except (ValueError, TypeError) as e:
        logger.warning("Failed to parse timestamp '%s': %s", ts, e)
        return None
    if parsed_time.tzinfo is None:
        return parsed_time.replace(tzinfo=UTC)
    return parsed_time


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds (naive means UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)
