# payments/services/transactions.py

"""
Ad-hoc income / expense (no order).

details:
- card / online / cheque -> rendered from method fields
- cash / qr / credit     -> "Ad-hoc <type>"

A credit transaction opens a balance (paid_amount = 0) that is settled later
with credit_settlement.record_installment().
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping

from django.utils import timezone

from payments.models import Payment
from payments.services.exceptions import PaymentValidationError
from payments.services.method_details import REQUIRED_FIELDS, render_method_details
from payments.services.reference_numbers import issue_reference_number

logger = logging.getLogger("payments")


def _ad_hoc_details(method: str, payment_type: str, method_details) -> str:
    if REQUIRED_FIELDS[method]:
        return render_method_details(method, method_details)
    return f"Ad-hoc {payment_type}"


def record_transaction(
    *,
    payment_type: str,
    description: str,
    amount,
    method: str,
    method_details: Mapping | None = None,
    transaction_date=None,
) -> Payment:
    payment_type = (payment_type or "").strip().lower()
    if payment_type not in Payment.PaymentType.values:
        raise PaymentValidationError("Transaction type is required.")

    description = (description or "").strip()
    if not description:
        raise PaymentValidationError("Description is required.")

    try:
        amt = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError) as exc:
        raise PaymentValidationError("Amount must be a number") from exc
    if amt <= Decimal("0.00"):
        raise PaymentValidationError("Amount must be a positive number.")

    method = (method or "").strip().lower()
    if method not in REQUIRED_FIELDS:
        raise PaymentValidationError(f"Unknown payment method: {method or '<empty>'}")

    payment = Payment.objects.create(
        description=description,
        date=transaction_date or timezone.localdate(),
        amount=amt,
        method=method,
        details=_ad_hoc_details(method, payment_type, method_details),
        payment_type=payment_type,
        reference_number=issue_reference_number(),
    )

    logger.info(
        "Ad-hoc transaction recorded",
        extra={
            "payment_id": str(payment.pk),
            "payment_type": payment_type,
            "method": method,
            "amount": str(amt),
            "reference_number": payment.reference_number,
        },
    )
    return payment
