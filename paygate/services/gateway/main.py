"""Public entrypoint for payment submission and lookup.

Validates request bodies, runs submissions through `PaymentService`, and maps
service results onto HTTP status codes.
"""

from contextlib import asynccontextmanager
from time import perf_counter
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from paygate.common.config import settings
from paygate.common.logging import bind_trace_id, configure_logging, logger
from paygate.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
)
from paygate.common.startup import log_startup_config
from paygate.common.tracing import instrument_app, setup_tracing
from paygate.services.gateway.bank_client import HttpBankGateway
from paygate.services.gateway.schemas import PaymentResponse, PaymentStatus, PostPaymentRequest
from paygate.services.gateway.service import LookupOutcome, PaymentService

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings.service_name,
    ["service_name", "log_level", "bank_url", "bank_timeout_seconds", "tracing_enabled"],
)
bank = HttpBankGateway(settings.bank_url, timeout=settings.bank_timeout_seconds)
service = PaymentService(bank)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Close the shared bank HTTP client on shutdown."""

    yield
    await bank.close()


app = FastAPI(title="PayGate Payment Gateway", lifespan=lifespan)
instrument_app(app)


def get_payment_service() -> PaymentService:
    return service


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Bind the correlation id and record request count and latency."""

    bind_trace_id(request.headers.get("x-correlation-id"))
    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.exception_handler(RequestValidationError)
async def payment_validation_handler(request: Request, exc: RequestValidationError):
    """Answer malformed payment bodies with a Rejected record instead of 422."""

    if request.method != "POST":
        return await request_validation_exception_handler(request, exc)
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}" for error in exc.errors()
    )
    logger.error("payment request rejected by validation: %s", errors)
    body = {"status": PaymentStatus.REJECTED.value, "errorMessage": errors}
    return JSONResponse(status_code=400, content=body)


@app.post("/payments", response_model=PaymentResponse)
async def post_payment(req: PostPaymentRequest, svc: PaymentService = Depends(get_payment_service)):
    """Submit a card payment; Rejected outcomes are returned with 400."""

    payment = await svc.submit_payment(req)
    if payment.status == PaymentStatus.REJECTED:
        return JSONResponse(status_code=400, content=payment.model_dump(mode="json", by_alias=True))
    return payment


@app.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: UUID, svc: PaymentService = Depends(get_payment_service)):
    """Fetch one payment record from the downstream record store."""

    result = await svc.get_payment_by_id(payment_id)
    if result.outcome == LookupOutcome.FOUND:
        return result.payment
    if result.outcome == LookupOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail=f"Payment with Id:{payment_id} could not be found")
    if result.status_code == 500:
        raise HTTPException(status_code=500, detail=result.error_message)
    raise HTTPException(status_code=400, detail=result.error_message)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
