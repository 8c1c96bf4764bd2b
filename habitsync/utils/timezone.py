"""
Timezone Utilities - Centralized timezone and calendar-date handling
"""
from datetime import date, datetime
from typing import Any, Optional
import logging

import pytz

from habitsync.core.config import settings

logger = logging.getLogger(__name__)


def get_reference_tz(name: Optional[str] = None):
    """
    Get the timezone that defines calendar-day boundaries

    Args:
        name: Optional tz database name; defaults to the configured timezone

    Returns:
        pytz timezone object
    """
    return pytz.timezone(name or settings.TIMEZONE)


def get_reference_now(tz=None) -> datetime:
    """
    Get current datetime in the reference timezone

    Returns:
        Timezone-aware datetime object
    """
    return datetime.now(tz or get_reference_tz())


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a wire timestamp into an aware datetime

    Naive values are taken to be UTC. Date-only values become midnight UTC.

    Args:
        value: ISO string, datetime or date

    Returns:
        Aware datetime, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparseable timestamp: {value!r}")
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed


def normalize_to_calendar_date(value: Any, tz=None) -> Optional[date]:
    """
    Reduce a date-like value to its calendar date in the reference timezone

    Every date-equality check goes through this function so that both sides
    of a comparison are normalized the same way.

    Args:
        value: ISO string, datetime or date
        tz: Reference timezone; defaults to the configured timezone

    Returns:
        date object, or None if the value cannot be parsed
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value

    # Bare "YYYY-MM-DD" strings already name a calendar day
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None

    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.astimezone(tz or get_reference_tz()).date()
