# payments/services/credit_settlement.py

"""
======================================================
PATH: payments/services/credit_settlement.py
======================================================
CREDIT SETTLEMENT TRACKER

Settles a credit Payment (method == "credit") in installments.

record_installment() performs TWO separate writes, not wrapped
in one transaction:
  1) insert the settlement Payment (new reference number)
  2) credit_payment.paid_amount += amount

If (2) fails after (1) succeeded, the settlement row stays in the database
without being reflected in paid_amount. PersistenceError.settlement_id names
that orphan so it can be repaired by hand.

The overpayment check reads paid_amount without a lock. Two concurrent
installments against the same credit payment can both pass it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping

from django.db import DatabaseError
from django.utils import timezone

from payments.models import Payment
from payments.services.exceptions import (
    OverpaymentError,
    PaymentValidationError,
    PersistenceError,
)
from payments.services.method_details import render_method_details
from payments.services.reference_numbers import issue_reference_number
from payments.signals import installment_recorded

logger = logging.getLogger("payments")

TWOPLACES = Decimal("0.01")

MESSAGE_FULLY_SETTLED = "Payment Complete"
MESSAGE_PARTIAL = "Installment Recorded"


@dataclass(frozen=True)
class InstallmentResult:
    settlement_payment: Payment
    credit_payment: Payment
    fully_settled: bool

    @property
    def message(self) -> str:
        return MESSAGE_FULLY_SETTLED if self.fully_settled else MESSAGE_PARTIAL


def _money(v) -> Decimal:
    try:
        return Decimal(str(v if v is not None else "0.00")).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )
    except InvalidOperation as exc:
        raise PaymentValidationError("Amount must be a number") from exc


def remaining(payment: Payment) -> Decimal:
    return _money(payment.amount) - _money(payment.paid_amount or 0)


def _insert_settlement(**fields) -> Payment:
    return Payment.objects.create(**fields)


def _write_paid_amount(credit_payment: Payment, paid_amount: Decimal) -> None:
    Payment.objects.filter(pk=credit_payment.pk).update(paid_amount=paid_amount)


def record_installment(
    *,
    credit_payment: Payment,
    amount,
    method: str,
    method_details: Mapping | None = None,
) -> InstallmentResult:
    """
    Record one installment against `credit_payment`.

    Method-specific fields are a caller precondition (see
    method_details.missing_method_fields); they are not re-checked here.
    """
    amt = _money(amount)
    if amt <= Decimal("0.00"):
        raise PaymentValidationError("Amount must be a positive number.")

    if not credit_payment.is_credit:
        raise PaymentValidationError("Installments can only settle credit payments.")

    method = (method or "").strip().lower()
    if method == Payment.Method.CREDIT:
        raise PaymentValidationError("An installment cannot itself be paid on credit.")

    left = remaining(credit_payment)
    if amt > left:
        logger.warning(
            "Installment rejected: exceeds remaining balance",
            extra={
                "credit_payment_id": str(credit_payment.pk),
                "amount": str(amt),
                "remaining": str(left),
            },
        )
        raise OverpaymentError(remaining=left)

    try:
        details = render_method_details(method, method_details)
    except ValueError as exc:
        raise PaymentValidationError(str(exc)) from exc

    # Step 1: settlement row
    try:
        settlement = _insert_settlement(
            purchase_order_id=credit_payment.purchase_order_id,
            sale_order_id=credit_payment.sale_order_id,
            settles=credit_payment,
            description=credit_payment.description,
            date=timezone.localdate(),
            amount=amt,
            method=method,
            details=details,
            payment_type=credit_payment.payment_type,
            reference_number=issue_reference_number(),
        )
    except DatabaseError as exc:
        logger.exception(
            "Installment insert failed; nothing written",
            extra={"credit_payment_id": str(credit_payment.pk)},
        )
        raise PersistenceError("Failed to record installment") from exc

    # Step 2: credit balance
    new_paid = _money(credit_payment.paid_amount or 0) + amt
    try:
        _write_paid_amount(credit_payment, new_paid)
    except DatabaseError as exc:
        logger.exception(
            "Credit balance update failed; settlement payment is orphaned",
            extra={
                "credit_payment_id": str(credit_payment.pk),
                "settlement_id": str(settlement.pk),
            },
        )
        raise PersistenceError(
            "Installment was recorded but the credit balance was not updated",
            settlement_id=settlement.pk,
        ) from exc

    credit_payment.paid_amount = new_paid
    fully_settled = new_paid >= _money(credit_payment.amount)

    logger.info(
        "Installment recorded",
        extra={
            "credit_payment_id": str(credit_payment.pk),
            "settlement_id": str(settlement.pk),
            "reference_number": settlement.reference_number,
            "amount": str(amt),
            "paid_amount": str(new_paid),
            "fully_settled": fully_settled,
        },
    )

    installment_recorded.send(
        sender=Payment,
        settlement_payment=settlement,
        credit_payment=credit_payment,
        fully_settled=fully_settled,
    )

    return InstallmentResult(
        settlement_payment=settlement,
        credit_payment=credit_payment,
        fully_settled=fully_settled,
    )
