"""SQLAlchemy ORM models for rent applications and payments"""

import uuid
from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class RentApplicationRow(Base):
    """Rent-assistance application"""

    __tablename__ = "applications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    monthly_rent = Column(Float, nullable=False)
    payment_term = Column(Integer, nullable=False)
    landlord_payment_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    payments = relationship("PaymentRow", back_populates="application", cascade="all, delete-orphan")


class PaymentRow(Base):
    """Payment collected through the payment gateway"""

    __tablename__ = "payments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    application_id = Column(Uuid(as_uuid=True), ForeignKey("applications.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    payment_method = Column(Text, nullable=False, default="paystack")
    transaction_id = Column(Text, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    application = relationship("RentApplicationRow", back_populates="payments")
