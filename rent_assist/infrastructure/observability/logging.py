"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from rent_assist.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_quote(request_id: str, kind: str, total: float, duration_ms: float) -> None:
    """Log a computed fee or schedule quote"""
    logging.info(
        "Quote computed",
        extra={
            "request_id": request_id,
            "step": "quote_complete",
            "quote_kind": kind,
            "total": round(total, 2),
            "duration_ms": duration_ms,
        },
    )


def log_eligibility(request_id: str, product: str, eligible: bool, reasons: list[str]) -> None:
    """Log an eligibility screen outcome"""
    logging.info(
        "Eligibility checked",
        extra={
            "request_id": request_id,
            "step": "eligibility_complete",
            "product": product,
            "outcome": "eligible" if eligible else "ineligible",
            "reasons": reasons,
        },
    )


def log_payment_recorded(request_id: str, application_id: str, amount: float, status: str) -> None:
    """Log a verified payment written against an application"""
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "application_id": application_id,
            "step": "payment_recorded",
            "amount": amount,
            "payment_status": status,
        },
    )
