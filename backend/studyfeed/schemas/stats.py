from datetime import date

from pydantic import BaseModel


class DayMinutes(BaseModel):
    date: date
    minutes: int


class WeeklyRing(BaseModel):
    """Arc gauge geometry for the weekly completion ring."""

    radius: int
    circumference: float
    dash_offset: float


class StatsSummary(BaseModel):
    today_minutes: int
    today_hours: int
    last7_days_minutes: int
    average_hours: int
    week_start: date
    week_end: date
    week_minutes: int
    week_hours: int
    days_with_records: int
    week_percentage: int
    ring: WeeklyRing
    week_days: list[DayMinutes]  # Monday..Sunday


class CalendarMonth(BaseModel):
    year: int
    month: int
    # Blank cells before the 1st in a Monday-first grid
    leading_blanks: int
    days: list[DayMinutes]
