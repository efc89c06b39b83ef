"""Acquiring bank simulator for local runs.

Decides authorizations from the last digit of the card number so results are
predictable: odd digits authorize, even digits decline, and 0 simulates the bank
being unavailable.
"""

from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from paygate.common.config import settings
from paygate.common.logging import configure_logging, logger
from paygate.common.startup import log_startup_config
from paygate.common.tracing import instrument_app, setup_tracing
from paygate.services.gateway.schemas import BankOutcome, BankPaymentRequest

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(settings.service_name, ["service_name", "log_level"])

app = FastAPI(title="PayGate Bank Simulator")
instrument_app(app)


@app.exception_handler(RequestValidationError)
async def missing_fields_handler(_: Request, exc: RequestValidationError):
    errors = [(error["loc"], error["msg"]) for error in exc.errors()]
    logger.warning("bank request rejected errors=%s", errors)
    return JSONResponse(
        status_code=400,
        content={"errorMessage": "Not all required properties were sent in the request"},
    )


@app.post("/payments", response_model=BankOutcome)
def authorize(req: BankPaymentRequest):
    """Authorize or decline one payment based on the card's last digit."""

    last_digit = req.card_number[-1:]
    if not last_digit.isdigit():
        raise HTTPException(status_code=400, detail="card_number must end in a digit")
    if last_digit == "0":
        logger.warning("simulated bank outage amount=%s currency=%s", req.amount, req.currency)
        raise HTTPException(status_code=503, detail="bank unavailable")
    if int(last_digit) % 2 == 1:
        return BankOutcome(authorized=True, authorization_code=str(uuid4()))
    return BankOutcome(authorized=False, authorization_code="")


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
