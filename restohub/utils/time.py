"""Calendar window helpers used for monthly and weekly queries."""

from __future__ import annotations

from datetime import date, datetime, timezone


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first day of the month and the first day of the next month."""
    if month < 1 or month > 12:
        raise ValueError("Month must be between 1 and 12")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def month_window_utc(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the month boundaries as UTC datetimes.

    Sale timestamps are stored in UTC, so day grouping is UTC as well.
    """
    start, end = month_bounds(year, month)
    return (
        datetime(start.year, start.month, start.day, tzinfo=timezone.utc),
        datetime(end.year, end.month, end.day, tzinfo=timezone.utc),
    )


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from SQLite as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
