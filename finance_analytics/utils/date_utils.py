"""Date manipulation utilities"""

import calendar
from datetime import date


def month_end(day: date) -> date:
    """Last calendar day of the month containing `day`"""
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length"""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def days_between(start: date, end: date) -> int:
    """Signed whole days from start to end"""
    return (end - start).days
