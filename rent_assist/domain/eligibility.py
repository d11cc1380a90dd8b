"""Eligibility screening for rent assistance and Buy-Now-Pay-Later"""

from datetime import date
from typing import List, Optional

from rent_assist.domain.fees import monthly_payment_with_interest
from rent_assist.domain.models import BNPLInstallment, BNPLQuote, EligibilityResult, RentApplicant
from rent_assist.utils.date_utils import add_months

QUALIFYING_EMPLOYMENT = frozenset({"full-time", "cagd-payroll", "non-cagd-payroll"})
MIN_EMPLOYMENT_MONTHS = 6
MIN_MONTHLY_RENT = 250.0
MIN_MONTHLY_SALARY = 1000.0
MIN_CREDIT_SCORE = 600
# Monthly repayment may not exceed this share of salary, in percent
MAX_PAYMENT_TO_INCOME = 40.0

BNPL_MONTHLY_INTEREST = 0.04


def payment_to_income_ratio(monthly_payment: float, monthly_salary: float) -> float:
    """Monthly payment as a percentage of salary"""
    if monthly_salary <= 0:
        return float("inf")
    return monthly_payment / monthly_salary * 100


def check_rent_eligibility(applicant: RentApplicant) -> EligibilityResult:
    """
    Screen a tenant for rent assistance.

    Requirements:
    - Full-time, CAGD payroll or non-CAGD payroll employment
    - At least 6 months with the current employer
    - Rent of at least 250 and salary of at least 1000
    - Rent plus interest no more than 40% of salary
    - Credit score of at least 600

    Returns:
        EligibilityResult listing every failed requirement
    """
    monthly_payment = monthly_payment_with_interest(applicant.monthly_rent)
    ratio = payment_to_income_ratio(monthly_payment, applicant.monthly_salary)

    reasons: List[str] = []
    if applicant.employment_status not in QUALIFYING_EMPLOYMENT:
        reasons.append("employment_status")
    if applicant.employment_months < MIN_EMPLOYMENT_MONTHS:
        reasons.append("employment_duration")
    if applicant.monthly_rent < MIN_MONTHLY_RENT:
        reasons.append("minimum_rent")
    if applicant.monthly_salary < MIN_MONTHLY_SALARY:
        reasons.append("minimum_salary")
    if ratio > MAX_PAYMENT_TO_INCOME:
        reasons.append("payment_to_income")
    if applicant.credit_score < MIN_CREDIT_SCORE:
        reasons.append("credit_score")

    return EligibilityResult(
        eligible=not reasons,
        payment_to_income_ratio=ratio,
        monthly_payment=monthly_payment,
        reasons=reasons,
    )


def calculate_bnpl_quote(
    item_price: float,
    payment_term: int,
    start_date: Optional[date] = None,
) -> BNPLQuote:
    """
    Flat-interest installment plan for a BNPL purchase.

    Interest is 4% of the item price per month of the term, spread evenly
    across monthly installments due one month apart.

    Example:
        1000 over 5 months → 200 interest, 1200 total, 240 a month
    """
    if start_date is None:
        start_date = date.today()

    total_interest = item_price * BNPL_MONTHLY_INTEREST * payment_term
    total_amount = item_price + total_interest
    monthly_payment = total_amount / payment_term

    installments = [
        BNPLInstallment(
            period=period,
            due_date=add_months(start_date, period),
            amount=monthly_payment,
        )
        for period in range(1, payment_term + 1)
    ]

    return BNPLQuote(
        item_price=item_price,
        payment_term=payment_term,
        total_interest=total_interest,
        total_amount=total_amount,
        monthly_payment=monthly_payment,
        installments=installments,
    )


def check_bnpl_eligibility(
    monthly_salary: float,
    item_price: float,
    payment_term: int,
    start_date: Optional[date] = None,
) -> tuple[EligibilityResult, BNPLQuote]:
    """Screen a BNPL purchase: minimum salary and repayment within 40% of salary"""
    quote = calculate_bnpl_quote(item_price, payment_term, start_date=start_date)
    ratio = payment_to_income_ratio(quote.monthly_payment, monthly_salary)

    reasons: List[str] = []
    if monthly_salary < MIN_MONTHLY_SALARY:
        reasons.append("minimum_salary")
    if ratio > MAX_PAYMENT_TO_INCOME:
        reasons.append("payment_to_income")

    result = EligibilityResult(
        eligible=not reasons,
        payment_to_income_ratio=ratio,
        monthly_payment=quote.monthly_payment,
        reasons=reasons,
    )
    return result, quote
