"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, date, datetime, time


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return utc_now().date()


def start_of_day(day: date) -> datetime:
    """
    Midnight UTC of the given date.

    Args:
        day: Calendar date

    Returns:
        Timezone-aware datetime at 00:00 UTC
    """
    return datetime.combine(day, time.min, tzinfo=UTC)
