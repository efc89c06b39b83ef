"""Expiry validation and bank outcome to payment status mapping."""

from datetime import datetime, timezone
from typing import Protocol

from paygate.services.gateway.schemas import PaymentStatus


class Clock(Protocol):
    """Source of the current time, injected so tests can pin it."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def is_expiry_valid(month: int, year: int, now: datetime) -> bool:
    """Return True when the card expires after the month containing `now`.

    A card expiring in the current month is already treated as expired.
    """

    if year < now.year:
        return False
    if year == now.year and month <= now.month:
        return False
    return True


def map_outcome_to_status(bank_succeeded: bool, authorized: bool | None) -> PaymentStatus:
    """Collapse a bank call result into the client-visible status."""

    if not bank_succeeded:
        return PaymentStatus.REJECTED
    if authorized:
        return PaymentStatus.AUTHORIZED
    return PaymentStatus.DECLINED


def last_four_digits(card_number: str | None) -> int:
    """Integer value of the last four card digits, 0 when not numeric."""

    tail = (card_number or "")[-4:]
    return int(tail) if tail.isdigit() else 0
