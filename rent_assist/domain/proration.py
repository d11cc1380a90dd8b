"""Proration of first-month rent and first payment date resolution"""

from datetime import date

from rent_assist.utils.date_utils import month_day

FIRST_PAYMENT_DAY = 25
# Landlord payments up to this day start repayment in the same month
SAME_MONTH_CUTOFF_DAY = 14


def calculate_prorated_rent(monthly_rent: float, start_day: int, days_in_month: int) -> float:
    """
    Rent for the days from ``start_day`` to the end of the month, inclusive.

    Example:
        3000 rent, start on the 20th of a 30-day month → 11 days x 100 = 1100
    """
    daily_rent = monthly_rent / days_in_month
    days_remaining = days_in_month - start_day + 1
    return daily_rent * days_remaining


def determine_first_payment_date(landlord_payment_date: date) -> date:
    """
    First repayment falls on the 25th.

    - Landlord paid on the 1st-14th: the 25th of the same month
    - Landlord paid on the 15th or later: the 25th of the following month
    """
    year = landlord_payment_date.year
    month = landlord_payment_date.month

    if landlord_payment_date.day <= SAME_MONTH_CUTOFF_DAY:
        return date(year, month, FIRST_PAYMENT_DAY)

    return month_day(year, month + 1, FIRST_PAYMENT_DAY)
