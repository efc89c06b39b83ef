"""Shared fixtures: a pinned clock and an in-memory bank double."""

import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("SERVICE_NAME", "payment-gateway-test")

from paygate.services.gateway.schemas import BankOutcome  # noqa: E402


NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now


class FakeBank:
    """Records calls and replays configured outcomes or errors."""

    def __init__(self) -> None:
        self.outcome = BankOutcome(authorized=True, authorization_code="auth-123")
        self.submit_error: Exception | None = None
        self.stored = None
        self.lookup_error: Exception | None = None
        self.submitted = []
        self.looked_up = []

    async def submit(self, req):
        self.submitted.append(req)
        if self.submit_error is not None:
            raise self.submit_error
        return self.outcome

    async def lookup(self, payment_id):
        self.looked_up.append(payment_id)
        if self.lookup_error is not None:
            raise self.lookup_error
        return self.stored


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def bank() -> FakeBank:
    return FakeBank()


@pytest.fixture
def payment_body() -> dict:
    """Valid camelCase submission expiring well after the pinned clock."""

    return {
        "cardNumber": "1234567890123456",
        "expiryMonth": 12,
        "expiryYear": 2028,
        "amount": 100,
        "currency": "GBP",
        "cvv": "123",
    }
