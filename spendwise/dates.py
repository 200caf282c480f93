"""Date utilities for spendwise.

Pure functions for calendar month arithmetic and labels.
"""

from datetime import date, datetime, time, timedelta


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from the month containing ``day``.

    Args:
        day: Any date in the reference month.
        months: Number of months to move (negative moves backwards).

    Returns:
        First day of the target month.
    """
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_label(day: date) -> str:
    """Short month label, e.g. "Jan 2024"."""
    return day.strftime("%b %Y")


def trailing_months(today: date, count: int = 6) -> list[date]:
    """First days of the ``count`` most recent months, oldest first.

    The month containing ``today`` is the last entry.
    """
    return [shift_month(today, -offset) for offset in range(count - 1, -1, -1)]


def same_day(day: date, today: date) -> bool:
    return day == today


def same_month(day: date, today: date) -> bool:
    return day.year == today.year and day.month == today.month


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """Last representable instant of ``day`` (23:59:59.999999)."""
    return datetime.combine(day, time.max)


def week_ago(now: datetime) -> datetime:
    return now - timedelta(days=7)
