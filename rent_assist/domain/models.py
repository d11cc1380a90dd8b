"""Domain models - pure Python dataclasses representing rent-assistance values"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FeeBreakdown:
    """One-time fees due at a stage of the application lifecycle.

    Components a stage does not charge are left as None. ``total`` is computed
    by the calculator that builds the breakdown; ``interest`` and
    ``initial_payment_required`` are informational and never part of it.
    """

    total: float
    service_fee: Optional[float] = None
    document_upload_fee: Optional[float] = None
    property_inspection_fee: Optional[float] = None
    refundable_rent_security: Optional[float] = None
    interest: Optional[float] = None
    initial_payment_required: Optional[float] = None
    prorated_rent: Optional[float] = None


@dataclass(frozen=True)
class ScheduleEntry:
    """Single row of an amortization table"""

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


@dataclass(frozen=True)
class PaymentSchedule:
    """Full repayment schedule for a (principal, rate, term) triple"""

    monthly_payment: float
    total_payments: float
    total_interest: float
    schedule: List[ScheduleEntry]


@dataclass(frozen=True)
class LateFeeTier:
    """Inclusive day-of-month range mapped to a penalty rate"""

    first_day: int
    last_day: int
    rate: float

    def contains(self, day_of_month: int) -> bool:
        return self.first_day <= day_of_month <= self.last_day


@dataclass
class RentApplicant:
    """Answers collected by the rent-assistance eligibility checker"""

    employment_status: str  # "full-time", "cagd-payroll", "part-time", ...
    employment_months: int
    monthly_salary: float
    monthly_rent: float
    credit_score: int


@dataclass
class EligibilityResult:
    """Outcome of an eligibility screen"""

    eligible: bool
    payment_to_income_ratio: float
    monthly_payment: float
    reasons: List[str] = field(default_factory=list)


@dataclass
class BNPLInstallment:
    """Single monthly installment of a Buy-Now-Pay-Later plan"""

    period: int
    due_date: date
    amount: float


@dataclass
class BNPLQuote:
    """Flat-interest installment plan for a BNPL purchase"""

    item_price: float
    payment_term: int
    total_interest: float
    total_amount: float
    monthly_payment: float
    installments: List[BNPLInstallment]


@dataclass
class UpcomingPayment:
    """Dashboard view of the next payment due"""

    amount: float
    due_date: date
    days_until: int
    is_late: bool
    late_fee: float
    status_message: str


@dataclass
class RentApplication:
    """Rent application as seen by the calculation core"""

    id: str
    user_id: str
    monthly_rent: float
    payment_term: int
    landlord_payment_date: date
    status: str
    created_at: datetime


@dataclass
class PaymentRecord:
    """Verified payment against a rent application"""

    id: str
    application_id: str
    amount: float
    status: str  # "pending" | "completed" | "failed"
    payment_method: str
    transaction_id: str
    created_at: datetime


@dataclass
class ChangeEvent:
    """Row-level change published on the change feed"""

    table: str
    action: str  # "insert" | "update"
    record: Dict[str, Any]
