"""Reporting aggregates over a user's own study records.

All functions are pure: they take "today" and an iterable of records with
`date` (calendar string) and `duration` (minutes). Records whose date does
not parse are skipped everywhere.
"""

import calendar
import math
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from studyfeed.core.constants import DAYS_IN_WEEK, RING_RADIUS
from studyfeed.core.time_utils import monday_of, parse_record_date
from studyfeed.schemas.stats import CalendarMonth, DayMinutes, StatsSummary, WeeklyRing


def minutes_by_day(records: Iterable, tz_name: Optional[str] = None) -> dict[date, int]:
    """Total minutes per calendar day, ignoring unparseable dates."""
    totals: dict[date, int] = defaultdict(int)
    for r in records:
        d = parse_record_date(r.date, tz_name)
        if d is None:
            continue
        totals[d] += int(r.duration or 0)
    return dict(totals)


def _window_minutes(totals: dict[date, int], end: date, days: int) -> int:
    """Minutes over the `days` calendar days ending `end` (inclusive)."""
    return sum(totals.get(end - timedelta(days=i), 0) for i in range(days))


def week_percentage(days_with_records: int) -> int:
    """round(days / 7 * 100), rounding halves up like the ring label."""
    pct = Decimal(days_with_records * 100) / Decimal(DAYS_IN_WEEK)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def weekly_ring(days_with_records: int, radius: int = RING_RADIUS) -> WeeklyRing:
    circumference = 2 * math.pi * radius
    fraction = days_with_records / DAYS_IN_WEEK
    return WeeklyRing(
        radius=radius,
        circumference=circumference,
        dash_offset=circumference * (1 - fraction),
    )


def summarize(records: Iterable, today: date, tz_name: Optional[str] = None) -> StatsSummary:
    totals = minutes_by_day(records, tz_name)

    today_total = _window_minutes(totals, today, 1)
    last7 = _window_minutes(totals, today, 7)

    week_start = monday_of(today)
    week_days = [week_start + timedelta(days=i) for i in range(DAYS_IN_WEEK)]
    week_points = [DayMinutes(date=d, minutes=totals.get(d, 0)) for d in week_days]
    week_total = sum(p.minutes for p in week_points)
    # A day counts once it has a record, even a 0-minute one
    days_with_records = sum(1 for d in week_days if d in totals)

    return StatsSummary(
        today_minutes=today_total,
        today_hours=today_total // 60,
        last7_days_minutes=last7,
        average_hours=math.floor(last7 / 7 / 60),
        week_start=week_start,
        week_end=week_days[-1],
        week_minutes=week_total,
        week_hours=week_total // 60,
        days_with_records=days_with_records,
        week_percentage=week_percentage(days_with_records),
        ring=weekly_ring(days_with_records),
        week_days=week_points,
    )


def calendar_month(
    records: Iterable,
    year: int,
    month: int,
    tz_name: Optional[str] = None,
) -> CalendarMonth:
    """Per-day totals for every day of the month, for badging calendar cells."""
    totals = minutes_by_day(records, tz_name)
    first_weekday, n_days = calendar.monthrange(year, month)
    days = [
        DayMinutes(date=date(year, month, day), minutes=totals.get(date(year, month, day), 0))
        for day in range(1, n_days + 1)
    ]
    return CalendarMonth(
        year=year,
        month=month,
        leading_blanks=first_weekday,  # Monday = 0
        days=days,
    )
