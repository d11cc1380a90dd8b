"""POST /v1/schedule - Amortization schedules and first payment dates"""

import time

from fastapi import APIRouter, Depends

from rent_assist.api.dependencies import get_request_id
from rent_assist.api.v1.schemas import (
    FirstPaymentDateRequest,
    FirstPaymentDateResponse,
    ScheduleEntrySchema,
    ScheduleRequest,
    ScheduleResponse,
    UpcomingPaymentRequest,
    UpcomingPaymentResponse,
)
from rent_assist.domain.payments import assess_upcoming_payment, payment_window_end
from rent_assist.domain.proration import determine_first_payment_date
from rent_assist.domain.schedule import calculate_payment_schedule
from rent_assist.infrastructure.observability.logging import log_quote
from rent_assist.infrastructure.observability.metrics import record_quote

router = APIRouter()


@router.post("/schedule", response_model=ScheduleResponse)
def create_schedule(request_body: ScheduleRequest, request_id: str = Depends(get_request_id)):
    """
    Generate a monthly amortization schedule.

    Returns:
        Nominal monthly payment, totals and one entry per month with
        discounts applied to the keyed payment numbers
    """
    start_time = time.time()

    result = calculate_payment_schedule(
        request_body.total_amount,
        request_body.interest_rate,
        request_body.months,
        discounts=request_body.discounts,
        start_date=request_body.start_date,
    )

    record_quote("schedule")
    log_quote(request_id, "schedule", result.total_payments, (time.time() - start_time) * 1000)

    return ScheduleResponse(
        monthly_payment=result.monthly_payment,
        total_payments=result.total_payments,
        total_interest=result.total_interest,
        schedule=[
            ScheduleEntrySchema(
                payment_number=entry.payment_number,
                payment_date=entry.payment_date,
                payment_amount=entry.payment_amount,
                principal_payment=entry.principal_payment,
                interest_payment=entry.interest_payment,
                remaining_balance=entry.remaining_balance,
                discount=entry.discount,
                discount_reason=entry.discount_reason,
                bonus=entry.bonus,
                bonus_reason=entry.bonus_reason,
            )
            for entry in result.schedule
        ],
    )


@router.post("/schedule/upcoming-payment", response_model=UpcomingPaymentResponse)
def upcoming_payment(request_body: UpcomingPaymentRequest):
    """Days until a payment is due and the late fee owed if it is overdue"""
    upcoming = assess_upcoming_payment(request_body.amount, request_body.due_date, today=request_body.today)
    return UpcomingPaymentResponse(
        amount=upcoming.amount,
        due_date=upcoming.due_date,
        days_until=upcoming.days_until,
        is_late=upcoming.is_late,
        late_fee=upcoming.late_fee,
        status_message=upcoming.status_message,
        payment_window_end=payment_window_end(upcoming.due_date),
    )


@router.post("/schedule/first-payment-date", response_model=FirstPaymentDateResponse)
def first_payment_date(request_body: FirstPaymentDateRequest):
    """25th of the same month for landlord payments up to the 14th, else of the next month"""
    return FirstPaymentDateResponse(
        landlord_payment_date=request_body.landlord_payment_date,
        first_payment_date=determine_first_payment_date(request_body.landlord_payment_date),
    )
