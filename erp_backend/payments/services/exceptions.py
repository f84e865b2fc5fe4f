# payments/services/exceptions.py

"""
PAYMENT SERVICE ERRORS

Centralized domain errors for payment services.
"""

from decimal import Decimal


class PaymentServiceError(Exception):
    """Base exception for all payment service failures."""


class PaymentValidationError(PaymentServiceError):
    """Raised when a payment request is malformed (amount, method, target)."""


class OverpaymentError(PaymentServiceError):
    """Raised when a payment exceeds what is still owed."""

    def __init__(self, remaining: Decimal, message: str | None = None):
        self.remaining = remaining
        super().__init__(
            message or f"Payment exceeds remaining balance. Max payable: {remaining:.2f}"
        )


class PersistenceError(PaymentServiceError):
    """
    Raised when a read/write against the database fails.

    settlement_id is set when an installment row was written but the credit
    balance update failed (an orphaned settlement).
    """

    def __init__(self, message: str, *, settlement_id=None):
        self.settlement_id = settlement_id
        super().__init__(message)
