"""UTC date and datetime utilities."""

from calendar import monthrange
from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Use this instead of datetime.now() or datetime.utcnow() so stored
    timestamps are always timezone-aware.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """
    Return the current calendar date in UTC.

    Booking dates are compared against this day, so "today" means the same
    thing for every request regardless of server timezone.
    """
    return utc_now().date()


def previous_month_bounds(today: date) -> tuple[date, date]:
    """
    Return the first and last day of the month before today's month.

    Example:
        >>> previous_month_bounds(date(2024, 3, 15))
        (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    """
    last_day = today.replace(day=1) - timedelta(days=1)
    return last_day.replace(day=1), last_day


def days_in_month(day: date) -> int:
    return monthrange(day.year, day.month)[1]
