"""Calendar matching and the per-instant variables exposed to predicates.

AND across axes (year, month, ISO week, day), OR within each axis's set.
"""

from __future__ import annotations

from datetime import date

from occasion.domain.models import DayOfMonth, DayOfWeek, Month, TimeSpec, Weekday


def evaluate_time(spec: TimeSpec, now: date) -> bool:
    """Return True when *now* satisfies every constrained axis of *spec*."""
    match_year = not spec.year or now.year in spec.year
    match_month = not spec.month or Month.of(now) in spec.month
    match_week = not spec.week or now.isocalendar().week in spec.week

    day_of = spec.day_of
    if isinstance(day_of, DayOfWeek):
        match_day = Weekday.of(now) in day_of.week
    elif isinstance(day_of, DayOfMonth):
        match_day = now.day in day_of.month
    else:
        match_day = True

    return match_year and match_month and match_week and match_day


def day_in_week(now: date, week_start_day: Weekday) -> int:
    """Offset of *now*'s weekday from *week_start_day* (0..6)."""
    return (now.weekday() - week_start_day.days_from_monday) % 7


def calendar_variables(now: date, week_start_day: Weekday) -> dict[str, int]:
    """Integer variables shared by predicates and command environments."""
    return {
        "DAY_IN_WEEK": day_in_week(now, week_start_day),
        "DAY_OF_MONTH": now.day,
        "WEEK": now.isocalendar().week,
        "MONTH": now.month,
        "YEAR": now.year,
    }
