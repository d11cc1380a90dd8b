"""Payment window tracking for the tenant dashboard"""

from datetime import date

from rent_assist.domain.fees import PAYMENT_WINDOW_CLOSES, PAYMENT_WINDOW_OPENS, calculate_late_payment_fee
from rent_assist.domain.models import UpcomingPayment
from rent_assist.utils.date_utils import month_day


def payment_window_end(due_date: date) -> date:
    """
    Last on-time day for a payment due on ``due_date``.

    A due date on or after the 25th closes on the 5th of the next month;
    earlier due dates already sit in the closing month.
    """
    if due_date.day >= PAYMENT_WINDOW_OPENS:
        return month_day(due_date.year, due_date.month + 1, PAYMENT_WINDOW_CLOSES)
    return date(due_date.year, due_date.month, PAYMENT_WINDOW_CLOSES)


def next_payment_window_start(today: date) -> date:
    """25th of this month, or of next month once the 25th has arrived"""
    if today.day >= PAYMENT_WINDOW_OPENS:
        return month_day(today.year, today.month + 1, PAYMENT_WINDOW_OPENS)
    return date(today.year, today.month, PAYMENT_WINDOW_OPENS)


def assess_upcoming_payment(amount: float, due_date: date, today: date | None = None) -> UpcomingPayment:
    """Days until due, late status and the late fee owed if paid today"""
    if today is None:
        today = date.today()

    days_until = (due_date - today).days
    is_late = days_until < 0
    late_fee = calculate_late_payment_fee(amount, today.day) if is_late else 0.0

    if days_until == 0:
        status_message = "Due today"
    elif is_late:
        status_message = f"{abs(days_until)} days overdue"
    else:
        status_message = f"Due in {days_until} days"

    return UpcomingPayment(
        amount=amount,
        due_date=due_date,
        days_until=days_until,
        is_late=is_late,
        late_fee=late_fee,
        status_message=status_message,
    )


def payment_progress(paid_amount: float, total_amount: float) -> float:
    """Share of the total repaid, in percent"""
    if total_amount <= 0:
        return 0.0
    return paid_amount / total_amount * 100
