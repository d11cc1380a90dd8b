"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from rent_assist.infrastructure.clients.payment_gateway import PaymentGatewayClient
from rent_assist.infrastructure.database.repositories import ApplicationRepository, PaymentRepository
from rent_assist.infrastructure.database.session import get_db
from rent_assist.infrastructure.realtime import ChangeFeed, change_feed


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payment_gateway_client() -> PaymentGatewayClient:
    """Provide payment verification client instance"""
    return PaymentGatewayClient()


def get_change_feed() -> ChangeFeed:
    return change_feed


def get_application_repository(
    db: Session = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> ApplicationRepository:
    return ApplicationRepository(db, feed)


def get_payment_repository(
    db: Session = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> PaymentRepository:
    return PaymentRepository(db, feed)
