"""Payment gateway verification client with exponential backoff retry logic"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from rent_assist.config import settings
from rent_assist.domain.exceptions import PaymentVerificationError
from rent_assist.infrastructure.observability.metrics import (
    verification_failure_counter,
    verification_latency_histogram,
)


@dataclass
class VerifiedPayment:
    """Gateway confirmation for a transaction reference"""

    reference: str
    amount: Optional[float]


class PaymentGatewayClient:
    """Client for the server-side payment verification function"""

    def __init__(
        self,
        verify_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.verify_url = verify_url or settings.payment_verify_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.verify_max_retries
        self.backoff_base = settings.verify_backoff_base
        self.transport = transport

    async def verify_payment(self, reference: str) -> VerifiedPayment:
        """
        Confirm a checkout reference with the gateway.

        Retry strategy:
        - Retries on 5xx responses and network failures, backing off base * 2^attempt
        - A 4xx response or an explicit ``success: false`` is final

        Raises:
            PaymentVerificationError: Gateway rejected the reference or stayed unavailable
        """
        headers = {"Content-Type": "application/json"}
        if settings.payment_gateway_secret:
            headers["Authorization"] = f"Bearer {settings.payment_gateway_secret}"

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with verification_latency_histogram.time():
                        response = await client.post(
                            self.verify_url,
                            json={"reference": reference},
                            headers=headers,
                        )
                        response.raise_for_status()
                    break

                except httpx.HTTPStatusError as e:
                    verification_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise PaymentVerificationError(
                            f"Payment verification rejected: {e.response.status_code}"
                        ) from e
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise PaymentVerificationError(
                            f"Payment gateway error after {attempt} attempts: {e.response.status_code}"
                        ) from e

                except httpx.RequestError as e:
                    verification_failure_counter.inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise PaymentVerificationError(
                            f"Payment gateway unreachable after {attempt} attempts"
                        ) from e

                await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))

        try:
            data = response.json()
        except ValueError as e:
            raise PaymentVerificationError("Invalid verification response from gateway") from e

        if not isinstance(data, dict):
            raise PaymentVerificationError("Invalid verification response from gateway")
        if not data.get("success"):
            raise PaymentVerificationError(data.get("message") or "Payment verification failed")

        amount = data.get("amount")
        if amount is None:
            return VerifiedPayment(reference=reference, amount=None)
        try:
            return VerifiedPayment(reference=reference, amount=float(amount))
        except (TypeError, ValueError) as e:
            raise PaymentVerificationError(f"Invalid amount in verification response: {amount!r}") from e
