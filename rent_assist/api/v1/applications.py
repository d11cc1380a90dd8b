"""/v1/applications - Rent applications and their gateway payments"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rent_assist.api.dependencies import (
    get_application_repository,
    get_payment_gateway_client,
    get_payment_repository,
    get_request_id,
)
from rent_assist.api.v1.schemas import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusRequest,
    PaymentCreateRequest,
    PaymentListResponse,
    PaymentResponse,
)
from rent_assist.domain.exceptions import (
    ApplicationNotFoundError,
    InvalidRecordError,
    InvalidStatusTransitionError,
    PaymentVerificationError,
)
from rent_assist.domain.fees import (
    calculate_deposit_and_interest,
    calculate_document_review_fee,
    monthly_payment_with_interest,
)
from rent_assist.domain.models import PaymentRecord, RentApplication
from rent_assist.domain.payments import payment_progress
from rent_assist.domain.proration import determine_first_payment_date
from rent_assist.infrastructure.clients.payment_gateway import PaymentGatewayClient
from rent_assist.infrastructure.database.repositories import (
    PAYABLE_STATUSES,
    ApplicationRepository,
    PaymentRepository,
)
from rent_assist.infrastructure.database.session import get_db
from rent_assist.infrastructure.observability.logging import log_payment_recorded
from rent_assist.infrastructure.observability.metrics import payment_counter

router = APIRouter()

# Gateway and tenant amounts may differ by rounding to the pesewa
AMOUNT_TOLERANCE = 0.01


def amount_due_now(application: RentApplication) -> float:
    """
    Amount the tenant owes at the application's current stage.

    pending: document review fee; approved: deposit and interest bundle;
    active: one month of rent plus interest; otherwise nothing.
    """
    if application.status == "pending":
        return calculate_document_review_fee(application.monthly_rent).total
    if application.status == "approved":
        return calculate_deposit_and_interest(application.monthly_rent, application.payment_term).total
    if application.status == "active":
        return monthly_payment_with_interest(application.monthly_rent)
    return 0.0


def to_application_response(application: RentApplication) -> ApplicationResponse:
    return ApplicationResponse(
        application_id=application.id,
        user_id=application.user_id,
        monthly_rent=application.monthly_rent,
        payment_term=application.payment_term,
        landlord_payment_date=application.landlord_payment_date,
        first_payment_date=determine_first_payment_date(application.landlord_payment_date),
        status=application.status,
        created_at=application.created_at.isoformat(),
        amount_due_now=amount_due_now(application),
    )


def to_payment_response(payment: PaymentRecord) -> PaymentResponse:
    return PaymentResponse(
        payment_id=payment.id,
        application_id=payment.application_id,
        amount=payment.amount,
        status=payment.status,
        payment_method=payment.payment_method,
        transaction_id=payment.transaction_id,
        created_at=payment.created_at.isoformat(),
    )


def _parse_id(application_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(application_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid application ID format")


def _same_application(payment: PaymentRecord, application_id: uuid.UUID) -> PaymentRecord:
    if payment.application_id != str(application_id):
        raise HTTPException(status_code=409, detail="Payment reference already used for another application")
    return payment


@router.post("/applications", response_model=ApplicationResponse, status_code=201)
def create_application(
    request_body: ApplicationCreateRequest,
    db: Session = Depends(get_db),
    applications: ApplicationRepository = Depends(get_application_repository),
):
    """Open a rent application in pending status"""
    application = applications.create_application(
        user_id=request_body.user_id,
        monthly_rent=request_body.monthly_rent,
        payment_term=request_body.payment_term,
        landlord_payment_date=request_body.landlord_payment_date,
    )
    db.commit()
    return to_application_response(application)


@router.get("/applications", response_model=ApplicationListResponse)
def list_applications(
    user_id: str = Query(..., description="User identifier"),
    applications: ApplicationRepository = Depends(get_application_repository),
):
    """Most recent applications for a user"""
    try:
        records = applications.get_applications_by_user(user_id, limit=20)
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ApplicationListResponse(
        user_id=user_id,
        applications=[to_application_response(a) for a in records],
    )


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: str,
    applications: ApplicationRepository = Depends(get_application_repository),
):
    """Retrieve an application with the amount due at its current stage"""
    try:
        application = applications.get_application(_parse_id(application_id))
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return to_application_response(application)


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    request_body: ApplicationStatusRequest,
    request_id: str = Depends(get_request_id),
    db: Session = Depends(get_db),
    applications: ApplicationRepository = Depends(get_application_repository),
):
    """Approve, reject, activate or complete an application"""
    app_uuid = _parse_id(application_id)
    try:
        application = applications.update_status(app_uuid, request_body.status)
        db.commit()
    except ApplicationNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Application not found")
    except InvalidStatusTransitionError as e:
        db.rollback()
        logging.warning(f"Rejected status change: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    return to_application_response(application)


@router.post("/applications/{application_id}/payments", response_model=PaymentResponse, status_code=201)
async def create_payment(
    application_id: str,
    request_body: PaymentCreateRequest,
    request_id: str = Depends(get_request_id),
    db: Session = Depends(get_db),
    applications: ApplicationRepository = Depends(get_application_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway_client),
):
    """
    Verify a checkout reference with the gateway and record the payment.

    Flow:
    1. Ensure the application exists and still accepts payments
    2. Return the existing record if the reference was already recorded for it
    3. Verify the reference and the amount with the payment gateway
    4. Persist the completed payment
    """
    app_uuid = _parse_id(application_id)

    try:
        application = applications.get_application(app_uuid)
        if application.status not in PAYABLE_STATUSES:
            raise HTTPException(
                status_code=409,
                detail=f"Application is {application.status} and accepts no payments",
            )

        existing = payments.get_payment_by_transaction(request_body.reference)
        if existing is not None:
            return to_payment_response(_same_application(existing, app_uuid))

        verified = await gateway.verify_payment(request_body.reference)
        if verified.amount is not None and abs(verified.amount - request_body.amount) > AMOUNT_TOLERANCE:
            raise PaymentVerificationError(
                f"Gateway confirmed {verified.amount:.2f} but {request_body.amount:.2f} was submitted"
            )

        try:
            payment = payments.record_payment(
                application_id=app_uuid,
                amount=request_body.amount,
                transaction_id=request_body.reference,
            )
            db.commit()
        except IntegrityError:
            # Another request recorded this reference first
            db.rollback()
            existing = payments.get_payment_by_transaction(request_body.reference)
            if existing is None:
                raise
            return to_payment_response(_same_application(existing, app_uuid))

    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")

    except PaymentVerificationError as e:
        db.rollback()
        payment_counter.labels(status="failed").inc()
        logging.error(f"Payment verification failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=str(e))

    except InvalidRecordError as e:
        db.rollback()
        logging.error(f"Invalid record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    payment_counter.labels(status=payment.status).inc()
    log_payment_recorded(request_id, payment.application_id, payment.amount, payment.status)

    return to_payment_response(payment)


@router.get("/applications/{application_id}/payments", response_model=PaymentListResponse)
def list_payments(
    application_id: str,
    applications: ApplicationRepository = Depends(get_application_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
):
    """Payments recorded against an application, oldest first"""
    app_uuid = _parse_id(application_id)
    try:
        application = applications.get_application(app_uuid)
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")

    records = payments.get_payments_for_application(app_uuid)
    total_paid = payments.total_paid(app_uuid)
    repayable = monthly_payment_with_interest(application.monthly_rent) * application.payment_term

    return PaymentListResponse(
        application_id=str(app_uuid),
        total_paid=total_paid,
        progress_percent=payment_progress(total_paid, repayable),
        payments=[to_payment_response(p) for p in records],
    )
