"""POST /v1/eligibility/* - Rent assistance and BNPL eligibility checks"""

from fastapi import APIRouter, Depends

from rent_assist.api.dependencies import get_request_id
from rent_assist.api.v1.schemas import (
    BNPLEligibilityRequest,
    BNPLEligibilityResponse,
    BNPLInstallmentSchema,
    EligibilityResponse,
    RentEligibilityRequest,
)
from rent_assist.domain.eligibility import check_bnpl_eligibility, check_rent_eligibility
from rent_assist.domain.models import RentApplicant
from rent_assist.infrastructure.observability.logging import log_eligibility
from rent_assist.infrastructure.observability.metrics import record_eligibility

router = APIRouter()


@router.post("/eligibility/rent", response_model=EligibilityResponse)
def rent_eligibility(request_body: RentEligibilityRequest, request_id: str = Depends(get_request_id)):
    """Screen a tenant against the rent-assistance requirements"""
    result = check_rent_eligibility(
        RentApplicant(
            employment_status=request_body.employment_status,
            employment_months=request_body.employment_months,
            monthly_salary=request_body.monthly_salary,
            monthly_rent=request_body.monthly_rent,
            credit_score=request_body.credit_score,
        )
    )

    record_eligibility("rent", result.eligible)
    log_eligibility(request_id, "rent", result.eligible, result.reasons)

    return EligibilityResponse(
        eligible=result.eligible,
        payment_to_income_ratio=result.payment_to_income_ratio,
        monthly_payment=result.monthly_payment,
        reasons=result.reasons,
    )


@router.post("/eligibility/bnpl", response_model=BNPLEligibilityResponse)
def bnpl_eligibility(request_body: BNPLEligibilityRequest, request_id: str = Depends(get_request_id)):
    """Screen a BNPL purchase and quote its installment plan"""
    result, quote = check_bnpl_eligibility(
        request_body.monthly_salary,
        request_body.item_price,
        request_body.payment_term,
        start_date=request_body.start_date,
    )

    record_eligibility("bnpl", result.eligible)
    log_eligibility(request_id, "bnpl", result.eligible, result.reasons)

    return BNPLEligibilityResponse(
        eligible=result.eligible,
        payment_to_income_ratio=result.payment_to_income_ratio,
        monthly_payment=result.monthly_payment,
        reasons=result.reasons,
        total_interest=quote.total_interest,
        total_amount=quote.total_amount,
        installments=[
            BNPLInstallmentSchema(period=inst.period, due_date=inst.due_date, amount=inst.amount)
            for inst in quote.installments
        ],
    )
