"""Amortization schedule generation and post-generation adjustments"""

from dataclasses import replace
from datetime import date
from typing import Callable, Dict, List, Optional

from rent_assist.domain.models import PaymentSchedule, ScheduleEntry
from rent_assist.utils.date_utils import add_months


def _monthly_rate(interest_rate: float) -> float:
    return interest_rate / 100 / 12


def calculate_monthly_payment(total_amount: float, interest_rate: float, months: int) -> float:
    """
    Fixed monthly payment that amortizes ``total_amount`` over ``months``.

    P = (r * PV) / (1 - (1 + r)^-n), with r the annual percentage rate / 12.
    A zero rate has no interest to amortize and splits the principal evenly.
    """
    monthly_rate = _monthly_rate(interest_rate)

    if monthly_rate == 0:
        return total_amount / months

    return (monthly_rate * total_amount) / (1 - (1 + monthly_rate) ** -months)


def calculate_total_interest(monthly_payment: float, months: int, principal: float) -> float:
    return monthly_payment * months - principal


def calculate_payment_schedule(
    total_amount: float,
    interest_rate: float,
    months: int,
    discounts: Optional[Dict[int, float]] = None,
    start_date: Optional[date] = None,
) -> PaymentSchedule:
    """
    Generate a month-by-month amortization schedule.

    Requirements:
    - One entry per month, numbered 1..months
    - Interest accrues on the balance left after the previous payment
    - Remaining balance is clamped at zero for display
    - A discount keyed by payment number lowers that entry's payment amount

    Args:
        total_amount: Principal to repay
        interest_rate: Annual interest rate in percent (28.08 for 28.08%)
        months: Number of monthly payments
        discounts: Discount amount per payment number
        start_date: Date payments are counted from (default: today)

    Returns:
        PaymentSchedule with nominal monthly payment, totals and entries
    """
    if discounts is None:
        discounts = {}
    if start_date is None:
        start_date = date.today()

    monthly_payment = calculate_monthly_payment(total_amount, interest_rate, months)
    monthly_rate = _monthly_rate(interest_rate)

    schedule = []
    remaining_balance = total_amount
    for payment_number in range(1, months + 1):
        interest_payment = remaining_balance * monthly_rate
        principal_payment = monthly_payment - interest_payment
        remaining_balance -= principal_payment

        discount = discounts.get(payment_number, 0.0)

        schedule.append(
            ScheduleEntry(
                payment_number=payment_number,
                payment_date=add_months(start_date, payment_number),
                payment_amount=monthly_payment - discount,
                principal_payment=principal_payment,
                interest_payment=interest_payment,
                remaining_balance=max(0.0, remaining_balance),
                discount=discount,
            )
        )

    total_payments = monthly_payment * months

    return PaymentSchedule(
        monthly_payment=monthly_payment,
        total_payments=total_payments,
        total_interest=calculate_total_interest(monthly_payment, months, total_amount),
        schedule=schedule,
    )


def apply_discount_to_schedule(
    schedule: List[ScheduleEntry],
    payment_number: int,
    discount_amount: float,
    reason: str,
) -> List[ScheduleEntry]:
    """
    Return a new schedule with a discount applied to one payment.

    Entries other than ``payment_number`` are carried over as-is. Applying a
    second discount to the same entry lowers the payment amount again; the
    ``discount`` field records the latest amount.
    """
    return [
        replace(
            entry,
            discount=discount_amount,
            discount_reason=reason,
            payment_amount=entry.payment_amount - discount_amount,
        )
        if entry.payment_number == payment_number
        else entry
        for entry in schedule
    ]


def apply_bonus_to_schedule(
    schedule: List[ScheduleEntry],
    criteria: Callable[[ScheduleEntry], bool],
    bonus_amount: float,
    reason: str,
) -> List[ScheduleEntry]:
    """Return a new schedule with a bonus applied to every entry matching ``criteria``"""
    return [
        replace(
            entry,
            bonus=bonus_amount,
            bonus_reason=reason,
            payment_amount=entry.payment_amount - bonus_amount,
        )
        if criteria(entry)
        else entry
        for entry in schedule
    ]
