"""POST /v1/fees/* - Fee quotes for each application stage"""

import time

from fastapi import APIRouter, Depends

from rent_assist.api.dependencies import get_request_id
from rent_assist.api.v1.schemas import (
    FeeBreakdownResponse,
    LateFeeRequest,
    LateFeeResponse,
    RentRequest,
    TermRentRequest,
)
from rent_assist.domain.fees import (
    calculate_deposit_and_interest,
    calculate_document_review_fee,
    calculate_initial_payment,
    calculate_initial_payment_with_proration,
    calculate_late_payment_fee,
    late_fee_rate,
)
from rent_assist.domain.models import FeeBreakdown
from rent_assist.infrastructure.observability.logging import log_quote
from rent_assist.infrastructure.observability.metrics import record_quote
from rent_assist.utils.formatting import format_currency

router = APIRouter()


def to_fee_response(breakdown: FeeBreakdown) -> FeeBreakdownResponse:
    return FeeBreakdownResponse(
        total=breakdown.total,
        total_display=format_currency(breakdown.total),
        service_fee=breakdown.service_fee,
        document_upload_fee=breakdown.document_upload_fee,
        property_inspection_fee=breakdown.property_inspection_fee,
        refundable_rent_security=breakdown.refundable_rent_security,
        interest=breakdown.interest,
        initial_payment_required=breakdown.initial_payment_required,
        prorated_rent=breakdown.prorated_rent,
    )


def _quoted(kind: str, breakdown: FeeBreakdown, request_id: str, start_time: float) -> FeeBreakdownResponse:
    record_quote(kind)
    log_quote(request_id, kind, breakdown.total, (time.time() - start_time) * 1000)
    return to_fee_response(breakdown)


@router.post("/fees/document-review", response_model=FeeBreakdownResponse)
def document_review_fee(request_body: RentRequest, request_id: str = Depends(get_request_id)):
    """Fee due when application documents are submitted for review"""
    start_time = time.time()
    breakdown = calculate_document_review_fee(request_body.monthly_rent)
    return _quoted("document_review", breakdown, request_id, start_time)


@router.post("/fees/initial", response_model=FeeBreakdownResponse)
def initial_payment(request_body: TermRentRequest, request_id: str = Depends(get_request_id)):
    """
    Full up-front payment.

    Includes prorated first-month rent when a landlord payment date on or
    after the 15th is supplied.
    """
    start_time = time.time()
    if request_body.landlord_payment_date is not None:
        breakdown = calculate_initial_payment_with_proration(
            request_body.monthly_rent,
            request_body.landlord_payment_date,
            request_body.payment_term,
        )
    else:
        breakdown = calculate_initial_payment(request_body.monthly_rent, request_body.payment_term)
    return _quoted("initial", breakdown, request_id, start_time)


@router.post("/fees/deposit", response_model=FeeBreakdownResponse)
def deposit_and_interest(request_body: TermRentRequest, request_id: str = Depends(get_request_id)):
    """Post-approval bundle: refundable security, service fee and inspection fee"""
    start_time = time.time()
    breakdown = calculate_deposit_and_interest(request_body.monthly_rent, request_body.payment_term)
    return _quoted("deposit", breakdown, request_id, start_time)


@router.post("/fees/late", response_model=LateFeeResponse)
def late_fee(request_body: LateFeeRequest):
    """Late penalty for a payment made on the given day of the month"""
    fee = calculate_late_payment_fee(request_body.amount, request_body.day_of_month)
    record_quote("late_fee")
    return LateFeeResponse(
        late_fee=fee,
        rate=late_fee_rate(request_body.day_of_month),
        late_fee_display=format_currency(fee),
    )
