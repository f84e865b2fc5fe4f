"""
PATH: payments/services/__init__.py

Payment service exports.
"""

from .credit_settlement import InstallmentResult, record_installment, remaining
from .exceptions import (
    OverpaymentError,
    PaymentServiceError,
    PaymentValidationError,
    PersistenceError,
)
from .method_details import missing_method_fields, render_method_details
from .order_payments import pay_purchase_order, pay_sale_order
from .reference_numbers import (
    is_valid_reference_number,
    issue_reference_number,
    reference_number_problem,
)
from .transactions import record_transaction

__all__ = [
    "InstallmentResult",
    "OverpaymentError",
    "PaymentServiceError",
    "PaymentValidationError",
    "PersistenceError",
    "is_valid_reference_number",
    "issue_reference_number",
    "missing_method_fields",
    "pay_purchase_order",
    "pay_sale_order",
    "record_installment",
    "record_transaction",
    "reference_number_problem",
    "remaining",
    "render_method_details",
]
