"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PaymentVerificationError(DomainException):
    """Payment gateway could not verify a transaction reference"""

    pass


class InvalidRecordError(DomainException):
    """Persisted record is malformed or violates the data model"""

    pass


class ApplicationNotFoundError(DomainException):
    """No rent application exists with the given id"""

    pass


class InvalidStatusTransitionError(DomainException):
    """Application status change is not allowed from its current status"""

    pass
