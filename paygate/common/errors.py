"""Failure taxonomy for payment submission and lookup.

The bank adapter raises these; the payment service catches them and turns each
one into a well-formed response object.
"""


class PaymentGatewayError(Exception):
    """Base error carrying a client-safe message and an HTTP status code."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ExpiryDateError(PaymentGatewayError):
    """Card expiry date is not in the future."""

    def __init__(self, month: int, year: int) -> None:
        super().__init__(f"Expiry date of {month}/{year} is not valid")
        self.month = month
        self.year = year


class DownstreamError(PaymentGatewayError):
    """The acquiring bank or record store did not produce a usable answer."""


class DownstreamClientError(DownstreamError):
    """Bank rejected the request as malformed (HTTP 400)."""

    def __init__(self, body: str) -> None:
        super().__init__(
            f"Error while processing payment, bank returned error, Error:{body}",
            status_code=400,
        )


class DownstreamStatusError(DownstreamError):
    """Bank answered with a non-success status or an unreadable body."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(body or f"Bank returned status {status_code}", status_code=status_code)


class DownstreamTransportError(DownstreamError):
    """Network failure or unexpected exception while calling the bank."""

    status_code = 500


class PaymentNotFoundError(DownstreamError):
    """Record store has no payment with the requested identifier."""

    status_code = 404
