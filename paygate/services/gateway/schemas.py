"""API request/response schemas for the payment gateway and its bank client."""

from enum import Enum
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaymentStatus(str, Enum):
    """Client-visible payment outcome."""

    AUTHORIZED = "Authorized"
    DECLINED = "Declined"
    REJECTED = "Rejected"


class Currency(str, Enum):
    """Currencies accepted by the acquiring bank."""

    GBP = "GBP"
    USD = "USD"
    EUR = "EUR"


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostPaymentRequest(CamelModel):
    """Payload accepted by `POST /payments`."""

    card_number: str = Field(min_length=14, max_length=19, pattern=r"^\d+$")
    expiry_month: int = Field(ge=1, le=12)
    expiry_year: int = Field(ge=1)
    amount: int = Field(gt=0)
    currency: Currency
    cvv: str = Field(min_length=3, max_length=4, pattern=r"^\d+$", repr=False)


class PaymentResponse(CamelModel):
    """Normalized payment record returned to clients.

    Only the last four card digits are ever carried here.
    """

    id: UUID
    status: PaymentStatus
    card_number_last_four: int
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int
    error_message: str = ""


class BankPaymentRequest(BaseModel):
    """Sanitized body sent to the acquiring bank."""

    card_number: str
    expiry_date: str
    currency: str
    amount: int
    cvv: str = Field(repr=False)

    @classmethod
    def from_submission(cls, req: PostPaymentRequest) -> "BankPaymentRequest":
        return cls(
            card_number=req.card_number,
            expiry_date=f"{req.expiry_month:02d}/{req.expiry_year}",
            currency=req.currency.value,
            amount=req.amount,
            cvv=req.cvv,
        )


class BankOutcome(BaseModel):
    """Authorization decision returned by the acquiring bank."""

    authorized: bool
    authorization_code: str = Field(
        default="",
        validation_alias=AliasChoices("authorization_code", "authorizationCode"),
    )


class StoredPayment(CamelModel):
    """Payment record as returned by the downstream record store.

    The store may hold the full card number; it is reduced to the last four
    digits before leaving the service.
    """

    id: UUID
    status: PaymentStatus
    card_number: str | None = None
    card_number_last_four: int | None = None
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int
