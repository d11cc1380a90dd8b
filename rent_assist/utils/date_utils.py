"""Date manipulation utilities"""

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of short months"""
    return from_date + relativedelta(months=months)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given calendar month"""
    return calendar.monthrange(year, month)[1]


def month_day(year: int, month: int, day: int) -> date:
    """Build a date, rolling a month past December into the next year"""
    return date(year, 1, day) + relativedelta(months=month - 1)
