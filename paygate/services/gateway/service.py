"""Payment submission and lookup.

Validates the card expiry, forwards accepted submissions to the acquiring bank,
and normalizes every bank outcome (including failures) into a `PaymentResponse`.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID, uuid4

from paygate.common.config import settings
from paygate.common.errors import DownstreamError, ExpiryDateError, PaymentNotFoundError
from paygate.common.logging import logger, payment_id_ctx
from paygate.common.metrics import payment_lookups_total, payment_outcomes_total, payment_requests_total
from paygate.services.gateway.bank_client import BankGateway
from paygate.services.gateway.schemas import (
    BankPaymentRequest,
    PaymentResponse,
    PaymentStatus,
    PostPaymentRequest,
    StoredPayment,
)
from paygate.services.gateway.validation import (
    Clock,
    SystemClock,
    is_expiry_valid,
    last_four_digits,
    map_outcome_to_status,
)


class LookupOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class PaymentLookup:
    """Result of `get_payment_by_id`; `payment` is set only when FOUND."""

    outcome: LookupOutcome
    payment: PaymentResponse | None = None
    status_code: int = 200
    error_message: str = ""


class PaymentService:
    """Translates client submissions into bank calls and back."""

    def __init__(self, bank: BankGateway, clock: Clock | None = None) -> None:
        self.bank = bank
        self.clock = clock or SystemClock()
        self.service_name = settings.service_name

    async def submit_payment(self, req: PostPaymentRequest) -> PaymentResponse:
        """Run one submission through expiry validation and the bank."""

        payment_requests_total.labels(service=self.service_name).inc()
        if not is_expiry_valid(req.expiry_month, req.expiry_year, self.clock.now()):
            error = ExpiryDateError(req.expiry_month, req.expiry_year)
            logger.error(error.message)
            return self._build_response(req, PaymentStatus.REJECTED, error.message)

        try:
            outcome = await self.bank.submit(BankPaymentRequest.from_submission(req))
        except DownstreamError as exc:
            logger.error("bank submission failed status_code=%s error=%s", exc.status_code, exc.message)
            return self._build_response(req, map_outcome_to_status(False, None), exc.message)

        return self._build_response(req, map_outcome_to_status(True, outcome.authorized))

    async def get_payment_by_id(self, payment_id: UUID) -> PaymentLookup:
        """Proxy a lookup to the record store, masking the card number."""

        payment_id_ctx.set(str(payment_id))
        try:
            stored = await self.bank.lookup(payment_id)
        except PaymentNotFoundError as exc:
            logger.warning(exc.message)
            payment_lookups_total.labels(service=self.service_name, outcome=LookupOutcome.NOT_FOUND.value).inc()
            return PaymentLookup(LookupOutcome.NOT_FOUND, status_code=exc.status_code, error_message=exc.message)
        except DownstreamError as exc:
            logger.error("payment lookup failed status_code=%s error=%s", exc.status_code, exc.message)
            payment_lookups_total.labels(service=self.service_name, outcome=LookupOutcome.ERROR.value).inc()
            return PaymentLookup(LookupOutcome.ERROR, status_code=exc.status_code, error_message=exc.message)

        payment_lookups_total.labels(service=self.service_name, outcome=LookupOutcome.FOUND.value).inc()
        return PaymentLookup(LookupOutcome.FOUND, payment=self._mask_stored(stored))

    def _build_response(
        self, req: PostPaymentRequest, status: PaymentStatus, error_message: str = ""
    ) -> PaymentResponse:
        payment_id = uuid4()
        payment_id_ctx.set(str(payment_id))
        payment_outcomes_total.labels(service=self.service_name, status=status.value).inc()
        return PaymentResponse(
            id=payment_id,
            status=status,
            card_number_last_four=last_four_digits(req.card_number),
            expiry_month=req.expiry_month,
            expiry_year=req.expiry_year,
            currency=req.currency.value,
            amount=req.amount,
            error_message=error_message,
        )

    @staticmethod
    def _mask_stored(stored: StoredPayment) -> PaymentResponse:
        last_four = stored.card_number_last_four
        if last_four is None:
            last_four = last_four_digits(stored.card_number)
        return PaymentResponse(
            id=stored.id,
            status=stored.status,
            card_number_last_four=last_four,
            expiry_month=stored.expiry_month,
            expiry_year=stored.expiry_year,
            currency=stored.currency,
            amount=stored.amount,
        )
