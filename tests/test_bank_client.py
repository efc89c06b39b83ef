"""HTTP bank adapter tests using httpx's mock transport."""

import asyncio
import json
from uuid import uuid4

import httpx
import pytest

from paygate.common.errors import (
    DownstreamClientError,
    DownstreamStatusError,
    DownstreamTransportError,
    PaymentNotFoundError,
)
from paygate.common.logging import trace_id_ctx
from paygate.services.gateway.bank_client import HttpBankGateway
from paygate.services.gateway.schemas import BankPaymentRequest, PaymentStatus

BANK_REQUEST = BankPaymentRequest(
    card_number="2222405343248877",
    expiry_date="04/2028",
    currency="GBP",
    amount=100,
    cvv="123",
)


def _call(handler, operation):
    """Run one gateway coroutine against `handler` and close the client."""

    gateway = HttpBankGateway("http://bank.test", transport=httpx.MockTransport(handler))

    async def run():
        try:
            return await operation(gateway)
        finally:
            await gateway.close()

    return asyncio.run(run())


def test_submit_returns_bank_outcome():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        seen["trace_id"] = request.headers.get("x-trace-id")
        return httpx.Response(200, json={"authorized": True, "authorization_code": "0bb07405"})

    async def submit(gateway):
        trace_id_ctx.set("trace-abc")
        return await gateway.submit(BANK_REQUEST)

    outcome = _call(handler, submit)

    assert outcome.authorized is True
    assert outcome.authorization_code == "0bb07405"
    assert seen["path"] == "/payments"
    assert seen["body"]["expiry_date"] == "04/2028"
    assert seen["body"]["card_number"] == "2222405343248877"
    assert seen["trace_id"] == "trace-abc"


def test_submit_accepts_camel_case_authorization_code():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"authorized": False, "authorizationCode": ""})

    outcome = _call(handler, lambda gateway: gateway.submit(BANK_REQUEST))

    assert outcome.authorized is False


def test_submit_bad_request_keeps_bank_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="Not all required properties were sent in the request")

    with pytest.raises(DownstreamClientError) as excinfo:
        _call(handler, lambda gateway: gateway.submit(BANK_REQUEST))

    assert excinfo.value.message.startswith("Error while processing payment, bank returned error")
    assert "Not all required properties" in excinfo.value.message


def test_submit_unavailable_bank():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(DownstreamStatusError) as excinfo:
        _call(handler, lambda gateway: gateway.submit(BANK_REQUEST))

    assert excinfo.value.status_code == 503
    assert excinfo.value.message == "Bank returned status 503"


def test_submit_unreadable_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(DownstreamStatusError) as excinfo:
        _call(handler, lambda gateway: gateway.submit(BANK_REQUEST))

    assert excinfo.value.status_code == 502


def test_submit_network_failure():
    """Connection errors surface as a transport error with a generic message."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DownstreamTransportError) as excinfo:
        _call(handler, lambda gateway: gateway.submit(BANK_REQUEST))

    assert excinfo.value.status_code == 500
    assert "connection refused" not in excinfo.value.message


def test_lookup_returns_stored_payment():
    payment_id = uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == f"/get/payment/{payment_id}"
        return httpx.Response(
            200,
            json={
                "id": str(payment_id),
                "status": "Authorized",
                "cardNumber": "2222405343248877",
                "expiryMonth": 4,
                "expiryYear": 2028,
                "currency": "GBP",
                "amount": 100,
            },
        )

    stored = _call(handler, lambda gateway: gateway.lookup(payment_id))

    assert stored.id == payment_id
    assert stored.status == PaymentStatus.AUTHORIZED


def test_lookup_missing_payment():
    payment_id = uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(PaymentNotFoundError) as excinfo:
        _call(handler, lambda gateway: gateway.lookup(payment_id))

    assert excinfo.value.message == f"Payment with Id:{payment_id} could not be found"


def test_lookup_server_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with pytest.raises(DownstreamStatusError) as excinfo:
        _call(handler, lambda gateway: gateway.lookup(uuid4()))

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "Failed to get payment details. StatusCode:500"


def test_lookup_network_failure():
    payment_id = uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(DownstreamTransportError) as excinfo:
        _call(handler, lambda gateway: gateway.lookup(payment_id))

    assert str(payment_id) in excinfo.value.message


def test_lookup_unreadable_body_is_internal_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(DownstreamStatusError) as excinfo:
        _call(handler, lambda gateway: gateway.lookup(uuid4()))

    assert excinfo.value.status_code == 500


def test_lookup_failure_log_omits_response_body(caplog):
    """Record store error bodies may carry card data and stay out of the logs."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, text="conflict for card 4111111111111111")

    with pytest.raises(DownstreamStatusError):
        _call(handler, lambda gateway: gateway.lookup(uuid4()))

    assert "status_code=409" in caplog.text
    assert "4111111111111111" not in caplog.text
