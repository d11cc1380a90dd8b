"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class RentRequest(BaseModel):
    """Request body for fee quotes that only depend on rent"""

    monthly_rent: float = Field(..., gt=0, description="Monthly rent in GHS")


class TermRentRequest(RentRequest):
    """Request body for fee quotes over a payment term"""

    payment_term: int = Field(12, gt=0, le=60, description="Repayment term in months")
    landlord_payment_date: Optional[date] = Field(
        None, description="Adds prorated first-month rent when on or after the 15th"
    )


class FeeBreakdownResponse(BaseModel):
    """Fee components for an application stage"""

    total: float
    total_display: str
    service_fee: Optional[float] = None
    document_upload_fee: Optional[float] = None
    property_inspection_fee: Optional[float] = None
    refundable_rent_security: Optional[float] = None
    interest: Optional[float] = None
    initial_payment_required: Optional[float] = None
    prorated_rent: Optional[float] = None


class LateFeeRequest(BaseModel):
    """Request body for POST /v1/fees/late"""

    amount: float = Field(..., ge=0)
    day_of_month: int = Field(..., ge=1, le=31, description="Calendar day the payment is made")


class LateFeeResponse(BaseModel):
    late_fee: float
    rate: float
    late_fee_display: str


class ScheduleRequest(BaseModel):
    """Request body for POST /v1/schedule"""

    total_amount: float = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0, description="Annual interest rate in percent")
    months: int = Field(..., gt=0, le=360)
    discounts: Dict[int, float] = Field(default_factory=dict, description="Discount per payment number")
    start_date: Optional[date] = None


class ScheduleEntrySchema(BaseModel):
    """Single row of a payment schedule"""

    payment_number: int
    payment_date: date
    payment_amount: float
    principal_payment: float
    interest_payment: float
    remaining_balance: float
    discount: float = 0.0
    discount_reason: Optional[str] = None
    bonus: float = 0.0
    bonus_reason: Optional[str] = None


class ScheduleResponse(BaseModel):
    """Response for POST /v1/schedule"""

    monthly_payment: float
    total_payments: float
    total_interest: float
    schedule: List[ScheduleEntrySchema]


class FirstPaymentDateRequest(BaseModel):
    landlord_payment_date: date


class FirstPaymentDateResponse(BaseModel):
    landlord_payment_date: date
    first_payment_date: date


class RentEligibilityRequest(BaseModel):
    """Request body for POST /v1/eligibility/rent"""

    employment_status: str = Field(..., min_length=1)
    employment_months: int = Field(..., ge=0)
    monthly_salary: float = Field(..., gt=0)
    monthly_rent: float = Field(..., gt=0)
    credit_score: int = Field(..., ge=0, le=900)


class BNPLEligibilityRequest(BaseModel):
    """Request body for POST /v1/eligibility/bnpl"""

    monthly_salary: float = Field(..., gt=0)
    item_price: float = Field(..., gt=0)
    payment_term: Literal[3, 4, 5, 6] = 3
    start_date: Optional[date] = None


class EligibilityResponse(BaseModel):
    eligible: bool
    payment_to_income_ratio: float
    monthly_payment: float
    reasons: List[str]


class BNPLInstallmentSchema(BaseModel):
    period: int
    due_date: date
    amount: float


class BNPLEligibilityResponse(EligibilityResponse):
    """Eligibility outcome with the quoted installment plan"""

    total_interest: float
    total_amount: float
    installments: List[BNPLInstallmentSchema]


class ApplicationCreateRequest(BaseModel):
    """Request body for POST /v1/applications"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    monthly_rent: float = Field(..., gt=0)
    payment_term: int = Field(12, gt=0, le=60)
    landlord_payment_date: date


class ApplicationStatusRequest(BaseModel):
    status: Literal["approved", "rejected", "active", "completed"]


class ApplicationResponse(BaseModel):
    """Application with the fee due at its current stage"""

    application_id: str
    user_id: str
    monthly_rent: float
    payment_term: int
    landlord_payment_date: date
    first_payment_date: date
    status: str
    created_at: str
    amount_due_now: float


class PaymentCreateRequest(BaseModel):
    """Request body for POST /v1/applications/{id}/payments"""

    reference: str = Field(..., min_length=1, description="Gateway transaction reference")
    amount: float = Field(..., gt=0)


class PaymentResponse(BaseModel):
    payment_id: str
    application_id: str
    amount: float
    status: str
    payment_method: str
    transaction_id: str
    created_at: str


class PaymentListResponse(BaseModel):
    """Response for GET /v1/applications/{id}/payments"""

    application_id: str
    total_paid: float
    progress_percent: float
    payments: List[PaymentResponse]


class ApplicationListResponse(BaseModel):
    """Response for GET /v1/applications"""

    user_id: str
    applications: List[ApplicationResponse]


class UpcomingPaymentRequest(BaseModel):
    """Request body for POST /v1/schedule/upcoming-payment"""

    amount: float = Field(..., gt=0)
    due_date: date
    today: Optional[date] = None


class UpcomingPaymentResponse(BaseModel):
    amount: float
    due_date: date
    days_until: int
    is_late: bool
    late_fee: float
    status_message: str
    payment_window_end: date
