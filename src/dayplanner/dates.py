from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta


def start_of_day(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def same_day(a: datetime | date, b: datetime | date) -> bool:
    return start_of_day(a) == start_of_day(b)


def add_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day (Jan 31 + 1 -> Feb 28/29)."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def week_interval(ref: datetime | date, week_start: int = 0) -> tuple[datetime, datetime]:
    """Half-open [start, end) of the calendar week holding ``ref``.

    ``week_start`` follows ``datetime.weekday()``: 0 is Monday (ISO weeks),
    6 is Sunday.
    """
    day = start_of_day(ref)
    offset = (day.weekday() - week_start) % 7
    start = day - timedelta(days=offset)
    return start, start + timedelta(days=7)


def month_interval(ref: datetime | date) -> tuple[datetime, datetime]:
    start = start_of_day(ref).replace(day=1)
    return start, add_months(start, 1)


def day_interval(ref: datetime | date) -> tuple[datetime, datetime]:
    start = start_of_day(ref)
    return start, start + timedelta(days=1)
