"""
Business calendar.

Turns date ranges into working days under the board's weekend and
holiday policy, and splits ranges into week / month buckets for period
rollups. Everything here is pure and deterministic for a given config.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from planboard.models import AppConfig, DateRange, Holiday


@dataclass(frozen=True)
class CalendarRange:
    """A labelled slice of a date window (one week or one month)."""
    start: date
    end: date
    label: str


def weekday_index(day: date) -> int:
    """Weekday index in the 0=Sunday .. 6=Saturday convention used by AppConfig."""
    return day.isoweekday() % 7


def is_holiday(day: date, holidays: Iterable[Holiday]) -> bool:
    for holiday in holidays:
        if holiday.recurring:
            # Recurring holidays ignore the stored year
            if (day.month, day.day) == (holiday.date.month, holiday.date.day):
                return True
        elif day == holiday.date:
            return True
    return False


def is_working_day(day: date, config: AppConfig) -> bool:
    if weekday_index(day) in config.weekend_days:
        return False
    if is_holiday(day, config.holidays):
        return False
    return True


def each_day(start: date, end: date) -> list[date]:
    """Every calendar day from start to end, inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def get_working_days(start: date | None, end: date | None, config: AppConfig) -> list[date]:
    """
    Inclusive working days between start and end.

    Returns an empty list when either bound is missing or start > end.
    """
    if start is None or end is None or start > end:
        return []
    return [day for day in each_day(start, end) if is_working_day(day, config)]


def count_working_days(start: date | None, end: date | None, config: AppConfig) -> int:
    return len(get_working_days(start, end, config))


def get_date_range(tasks: Sequence) -> DateRange | None:
    """Span from the earliest to the latest date set on any of the tasks."""
    dates = []
    for task in tasks:
        if task.start_date is not None:
            dates.append(task.start_date)
        if task.end_date is not None:
            dates.append(task.end_date)
    if not dates:
        return None
    return DateRange(start=min(dates), end=max(dates))


def get_week_ranges(start: date, end: date) -> list[CalendarRange]:
    """
    Monday-start weeks covering [start, end].

    The first and last weeks are clipped to the window bounds.
    """
    ranges = []
    current = start - timedelta(days=start.weekday())
    while current <= end:
        week_end = current + timedelta(days=6)
        effective_start = max(current, start)
        effective_end = min(week_end, end)
        ranges.append(CalendarRange(
            start=effective_start,
            end=effective_end,
            label=effective_start.strftime("%d %b"),
        ))
        current = week_end + timedelta(days=1)
    return ranges


def _month_end(day: date) -> date:
    if day.month == 12:
        next_month = date(day.year + 1, 1, 1)
    else:
        next_month = date(day.year, day.month + 1, 1)
    return next_month - timedelta(days=1)


def get_month_ranges(start: date, end: date) -> list[CalendarRange]:
    """Calendar months covering [start, end], clipped to the window bounds."""
    ranges = []
    current = start.replace(day=1)
    while current <= end:
        month_end = _month_end(current)
        ranges.append(CalendarRange(
            start=max(current, start),
            end=min(month_end, end),
            label=current.strftime("%b %Y"),
        ))
        current = month_end + timedelta(days=1)
    return ranges
