"""Fee calculations for the rent-assistance application lifecycle"""

from datetime import date
from typing import Tuple

from rent_assist.domain.models import FeeBreakdown, LateFeeTier
from rent_assist.domain.proration import calculate_prorated_rent
from rent_assist.utils.date_utils import days_in_month

# Monthly interest charged on rent, quoted as 28.08% annual-equivalent
INTEREST_FACTOR = 0.2808
DOCUMENT_UPLOAD_FEE = 65.0
PROPERTY_INSPECTION_FEE = 125.0
SECURITY_DEPOSIT_MONTHS = 2

# Landlord payments on or after this day add prorated first-month rent
PRORATION_CUTOFF_DAY = 15

# Payments made between the 25th and the 5th are on time
PAYMENT_WINDOW_OPENS = 25
PAYMENT_WINDOW_CLOSES = 5

LATE_FEE_TIERS: Tuple[LateFeeTier, ...] = (
    LateFeeTier(first_day=6, last_day=12, rate=0.10),
    LateFeeTier(first_day=13, last_day=18, rate=0.15),
    LateFeeTier(first_day=19, last_day=24, rate=0.25),
)


def monthly_payment_with_interest(monthly_rent: float) -> float:
    """Rent plus one month of interest"""
    return monthly_rent + monthly_rent * INTEREST_FACTOR


def _refundable_rent_security(monthly_rent: float) -> float:
    return monthly_payment_with_interest(monthly_rent) * SECURITY_DEPOSIT_MONTHS


def _term_interest(monthly_rent: float, payment_term: int) -> float:
    return monthly_rent * INTEREST_FACTOR * payment_term


def calculate_initial_payment(monthly_rent: float, payment_term: int = 12) -> FeeBreakdown:
    """
    Full up-front bundle: security deposit, service fee, document and inspection fees.

    Args:
        monthly_rent: Rent the tenant pays the landlord each month
        payment_term: Repayment term in months; only affects the informational interest

    Returns:
        FeeBreakdown whose total is security + service + document + inspection

    Example:
        rent 1000, term 12 → security 2561.60, service 1000, total 3751.60
    """
    service_fee = monthly_rent
    refundable_rent_security = _refundable_rent_security(monthly_rent)

    return FeeBreakdown(
        refundable_rent_security=refundable_rent_security,
        interest=_term_interest(monthly_rent, payment_term),
        initial_payment_required=refundable_rent_security,
        service_fee=service_fee,
        property_inspection_fee=PROPERTY_INSPECTION_FEE,
        document_upload_fee=DOCUMENT_UPLOAD_FEE,
        total=refundable_rent_security + service_fee + DOCUMENT_UPLOAD_FEE + PROPERTY_INSPECTION_FEE,
    )


def calculate_document_review_fee(monthly_rent: float) -> FeeBreakdown:
    """
    Fee charged when documents are submitted, before any review.

    Only the document upload fee is due at this stage; the service fee moves
    to the post-approval bundle. ``monthly_rent`` does not affect the amount.
    """
    service_fee = 0.0

    return FeeBreakdown(
        service_fee=service_fee,
        document_upload_fee=DOCUMENT_UPLOAD_FEE,
        total=service_fee + DOCUMENT_UPLOAD_FEE,
    )


def calculate_deposit_and_interest(monthly_rent: float, payment_term: int = 12) -> FeeBreakdown:
    """
    Bundle charged after the application is approved.

    The document upload fee was collected at review time and is excluded here.
    """
    refundable_rent_security = _refundable_rent_security(monthly_rent)
    service_fee = monthly_rent

    return FeeBreakdown(
        refundable_rent_security=refundable_rent_security,
        interest=_term_interest(monthly_rent, payment_term),
        initial_payment_required=refundable_rent_security,
        property_inspection_fee=PROPERTY_INSPECTION_FEE,
        service_fee=service_fee,
        total=refundable_rent_security + service_fee + PROPERTY_INSPECTION_FEE,
    )


def calculate_initial_payment_with_proration(
    monthly_rent: float,
    landlord_payment_date: date,
    payment_term: int = 12,
) -> FeeBreakdown:
    """Initial payment plus prorated rent when the landlord is paid on or after the 15th"""
    standard = calculate_initial_payment(monthly_rent, payment_term)

    payment_day = landlord_payment_date.day
    if payment_day < PRORATION_CUTOFF_DAY:
        return standard

    month_length = days_in_month(landlord_payment_date.year, landlord_payment_date.month)
    prorated_rent = calculate_prorated_rent(monthly_rent, payment_day, month_length)

    return FeeBreakdown(
        refundable_rent_security=standard.refundable_rent_security,
        interest=standard.interest,
        initial_payment_required=standard.initial_payment_required,
        service_fee=standard.service_fee,
        property_inspection_fee=standard.property_inspection_fee,
        document_upload_fee=standard.document_upload_fee,
        prorated_rent=prorated_rent,
        total=standard.total + prorated_rent,
    )


def is_within_payment_window(day_of_month: int) -> bool:
    """True between the 25th and the 5th, inclusive"""
    return day_of_month >= PAYMENT_WINDOW_OPENS or day_of_month <= PAYMENT_WINDOW_CLOSES


def late_fee_rate(day_of_month: int) -> float:
    """
    Penalty rate for a payment made on the given calendar day.

    Tiers:
    - 25th-5th: 0% (payment window)
    - 6th-12th: 10%
    - 13th-18th: 15%
    - 19th-24th: 25%

    Days outside 1-31 match no tier and carry no penalty.
    """
    if is_within_payment_window(day_of_month):
        return 0.0

    for tier in LATE_FEE_TIERS:
        if tier.contains(day_of_month):
            return tier.rate

    return 0.0


def calculate_late_payment_fee(amount: float, day_of_month: int) -> float:
    """Late penalty on ``amount`` for a payment made on ``day_of_month`` (today, not the due date)"""
    rate = late_fee_rate(day_of_month)
    if rate == 0.0:
        return 0.0
    return amount * rate
