"""Prometheus metrics for quotes, eligibility outcomes and payment verification"""

from prometheus_client import Counter, Histogram

# Calculation metrics
quote_counter = Counter(
    "rent_assist_quotes_total",
    "Fee and schedule quotes computed",
    ["kind"],  # document_review | initial | deposit | late_fee | schedule
)

eligibility_counter = Counter(
    "rent_assist_eligibility_total",
    "Eligibility screens performed",
    ["product", "outcome"],  # rent | bnpl, eligible | ineligible
)

# Payment metrics
payment_counter = Counter(
    "rent_assist_payments_total",
    "Payments recorded against applications",
    ["status"],  # completed | failed
)

verification_latency_histogram = Histogram(
    "payment_verification_latency_seconds",
    "Payment gateway verification response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

verification_failure_counter = Counter(
    "payment_verification_failures_total",
    "Failed payment verification calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(kind: str) -> None:
    quote_counter.labels(kind=kind).inc()


def record_eligibility(product: str, eligible: bool) -> None:
    """Record eligibility outcome for monitoring approval rates per product"""
    outcome = "eligible" if eligible else "ineligible"
    eligibility_counter.labels(product=product, outcome=outcome).inc()
