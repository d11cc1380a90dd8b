"""Data access layer for rent applications and payments"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session

from rent_assist.domain.exceptions import (
    ApplicationNotFoundError,
    InvalidRecordError,
    InvalidStatusTransitionError,
)
from rent_assist.domain.models import ChangeEvent, PaymentRecord, RentApplication
from rent_assist.infrastructure.database.models import PaymentRow, RentApplicationRow
from rent_assist.infrastructure.realtime import ChangeFeed

# pending → approved/rejected after document review, approved → active once
# the deposit bundle is paid, active → completed at the end of the term
STATUS_TRANSITIONS: Dict[str, frozenset] = {
    "pending": frozenset({"approved", "rejected"}),
    "approved": frozenset({"active", "rejected"}),
    "active": frozenset({"completed"}),
    "rejected": frozenset(),
    "completed": frozenset(),
}

PAYMENT_STATUSES = frozenset({"pending", "completed", "failed"})

# Rejected and completed applications owe nothing further
PAYABLE_STATUSES = frozenset({"pending", "approved", "active"})

_PENDING_CHANGES = "pending_changes"


def to_rent_application(row: RentApplicationRow) -> RentApplication:
    """Validate a persisted application row and convert it to its domain record"""
    if row.status not in STATUS_TRANSITIONS:
        raise InvalidRecordError(f"Unknown application status: {row.status!r}")
    if row.monthly_rent is None or row.monthly_rent <= 0:
        raise InvalidRecordError(f"Application {row.id} has invalid monthly rent: {row.monthly_rent!r}")
    if row.payment_term is None or row.payment_term <= 0:
        raise InvalidRecordError(f"Application {row.id} has invalid payment term: {row.payment_term!r}")
    if not isinstance(row.landlord_payment_date, date):
        raise InvalidRecordError(f"Application {row.id} has no landlord payment date")

    return RentApplication(
        id=str(row.id),
        user_id=row.user_id,
        monthly_rent=float(row.monthly_rent),
        payment_term=int(row.payment_term),
        landlord_payment_date=row.landlord_payment_date,
        status=row.status,
        created_at=row.created_at,
    )


def to_payment_record(row: PaymentRow) -> PaymentRecord:
    """Validate a persisted payment row and convert it to its domain record"""
    if row.status not in PAYMENT_STATUSES:
        raise InvalidRecordError(f"Unknown payment status: {row.status!r}")
    if row.amount is None or row.amount < 0:
        raise InvalidRecordError(f"Payment {row.id} has invalid amount: {row.amount!r}")

    return PaymentRecord(
        id=str(row.id),
        application_id=str(row.application_id),
        amount=float(row.amount),
        status=row.status,
        payment_method=row.payment_method,
        transaction_id=row.transaction_id,
        created_at=row.created_at,
    )


def _as_event_record(record: Any) -> Dict[str, Any]:
    return {
        key: value.isoformat() if isinstance(value, (date, datetime)) else value
        for key, value in vars(record).items()
    }


def _queue_change(db: Session, feed: Optional[ChangeFeed], change: ChangeEvent) -> None:
    """Hold ``change`` on the session until its transaction commits"""
    if feed is not None:
        db.info.setdefault(_PENDING_CHANGES, []).append((feed, change))


def _deliver_changes(session: Session) -> None:
    for feed, change in session.info.pop(_PENDING_CHANGES, []):
        feed.publish(change)


def _discard_changes(session: Session) -> None:
    session.info.pop(_PENDING_CHANGES, None)


# Subscribers only see writes that actually persisted
event.listen(Session, "after_commit", _deliver_changes)
event.listen(Session, "after_rollback", _discard_changes)


class ApplicationRepository:
    """Repository for rent applications"""

    def __init__(self, db: Session, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed

    def create_application(
        self,
        user_id: str,
        monthly_rent: float,
        payment_term: int,
        landlord_payment_date: date,
    ) -> RentApplication:
        """Persist a new application in pending status"""
        row = RentApplicationRow(
            user_id=user_id,
            monthly_rent=monthly_rent,
            payment_term=payment_term,
            landlord_payment_date=landlord_payment_date,
            status="pending",
        )
        self.db.add(row)
        self.db.flush()  # Get ID and server defaults without committing
        self.db.refresh(row)

        application = to_rent_application(row)
        self._publish("insert", application)
        return application

    def get_application(self, application_id: uuid.UUID) -> RentApplication:
        return to_rent_application(self._get_row(application_id))

    def get_applications_by_user(self, user_id: str, limit: int = 10) -> List[RentApplication]:
        """Fetch recent applications for a user"""
        rows = (
            self.db.query(RentApplicationRow)
            .filter(RentApplicationRow.user_id == user_id)
            .order_by(RentApplicationRow.created_at.desc())
            .limit(limit)
            .all()
        )
        return [to_rent_application(row) for row in rows]

    def update_status(self, application_id: uuid.UUID, status: str) -> RentApplication:
        """
        Move an application to ``status``.

        Raises:
            ApplicationNotFoundError: No application with this id
            InvalidStatusTransitionError: Transition not allowed from the current status
        """
        row = self._get_row(application_id)
        allowed = STATUS_TRANSITIONS.get(row.status, frozenset())
        if status not in allowed:
            raise InvalidStatusTransitionError(f"Cannot move application from {row.status!r} to {status!r}")

        row.status = status
        self.db.flush()

        application = to_rent_application(row)
        self._publish("update", application)
        return application

    def _get_row(self, application_id: uuid.UUID) -> RentApplicationRow:
        row = (
            self.db.query(RentApplicationRow)
            .filter(RentApplicationRow.id == application_id)
            .first()
        )
        if row is None:
            raise ApplicationNotFoundError(f"Application {application_id} not found")
        return row

    def _publish(self, action: str, application: RentApplication) -> None:
        _queue_change(
            self.db,
            self.feed,
            ChangeEvent(table="applications", action=action, record=_as_event_record(application)),
        )


class PaymentRepository:
    """Repository for gateway payments"""

    def __init__(self, db: Session, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed

    def record_payment(
        self,
        application_id: uuid.UUID,
        amount: float,
        transaction_id: str,
        status: str = "completed",
        payment_method: str = "paystack",
    ) -> PaymentRecord:
        """Persist a payment against an application"""
        row = PaymentRow(
            application_id=application_id,
            amount=amount,
            status=status,
            payment_method=payment_method,
            transaction_id=transaction_id,
        )
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)

        payment = to_payment_record(row)
        _queue_change(self.db, self.feed, ChangeEvent(table="payments", action="insert", record=_as_event_record(payment)))
        return payment

    def get_payment_by_transaction(self, transaction_id: str) -> Optional[PaymentRecord]:
        row = (
            self.db.query(PaymentRow)
            .filter(PaymentRow.transaction_id == transaction_id)
            .first()
        )
        return to_payment_record(row) if row else None

    def get_payments_for_application(self, application_id: uuid.UUID) -> List[PaymentRecord]:
        """Fetch payments for an application, oldest first"""
        rows = (
            self.db.query(PaymentRow)
            .filter(PaymentRow.application_id == application_id)
            .order_by(PaymentRow.created_at.asc())
            .all()
        )
        return [to_payment_record(row) for row in rows]

    def total_paid(self, application_id: uuid.UUID) -> float:
        return sum(p.amount for p in self.get_payments_for_application(application_id) if p.status == "completed")
