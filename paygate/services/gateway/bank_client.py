"""Acquiring bank adapter.

`BankGateway` is the seam the payment service depends on; `HttpBankGateway`
talks to the bank (and its payment record store) over HTTP and converts every
failure into one of the `DownstreamError` subclasses.
"""

from typing import Protocol
from uuid import UUID

import httpx

from paygate.common.config import settings
from paygate.common.errors import (
    DownstreamClientError,
    DownstreamStatusError,
    DownstreamTransportError,
    PaymentNotFoundError,
)
from paygate.common.logging import logger, trace_id_ctx
from paygate.common.metrics import bank_request_duration_seconds
from paygate.services.gateway.schemas import BankOutcome, BankPaymentRequest, StoredPayment


class BankGateway(Protocol):
    """Operations the payment service needs from the bank."""

    async def submit(self, req: BankPaymentRequest) -> BankOutcome: ...

    async def lookup(self, payment_id: UUID) -> StoredPayment: ...


class HttpBankGateway:
    """Lazy httpx client wrapper for the bank's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        trace_id = trace_id_ctx.get()
        return {"x-trace-id": trace_id} if trace_id else {}

    async def submit(self, req: BankPaymentRequest) -> BankOutcome:
        """Post one authorization request and return the bank's decision."""

        with bank_request_duration_seconds.labels(
            service=settings.service_name,
            operation="submit",
        ).time():
            try:
                resp = await self.client().post("/payments", json=req.model_dump(), headers=self._headers())
            except Exception as exc:
                logger.exception("Unexpected error occurred while processing payment: %s", exc)
                raise DownstreamTransportError(
                    "An unexpected error occurred while processing payment"
                ) from exc

        if resp.status_code == httpx.codes.BAD_REQUEST:
            raise DownstreamClientError(resp.text)
        if not resp.is_success:
            raise DownstreamStatusError(resp.status_code, resp.text)
        try:
            return BankOutcome.model_validate(resp.json())
        except ValueError as exc:
            raise DownstreamStatusError(httpx.codes.BAD_GATEWAY, "Bank returned an unreadable response") from exc

    async def lookup(self, payment_id: UUID) -> StoredPayment:
        """Fetch one stored payment record by identifier."""

        with bank_request_duration_seconds.labels(
            service=settings.service_name,
            operation="lookup",
        ).time():
            try:
                resp = await self.client().get(f"/get/payment/{payment_id}", headers=self._headers())
            except Exception as exc:
                logger.exception("An error occurred while getting the details for payment_id=%s", payment_id)
                raise DownstreamTransportError(
                    f"An error occurred while getting the details for PaymentId:{payment_id}"
                ) from exc

        if resp.status_code == httpx.codes.NOT_FOUND:
            raise PaymentNotFoundError(f"Payment with Id:{payment_id} could not be found")
        if not resp.is_success:
            logger.warning(
                "Failed to get payment details payment_id=%s status_code=%s",
                payment_id,
                resp.status_code,
            )
            raise DownstreamStatusError(
                resp.status_code,
                f"Failed to get payment details. StatusCode:{resp.status_code}",
            )
        try:
            return StoredPayment.model_validate(resp.json())
        except ValueError as exc:
            raise DownstreamStatusError(
                httpx.codes.INTERNAL_SERVER_ERROR,
                "Record store returned an unreadable response",
            ) from exc
