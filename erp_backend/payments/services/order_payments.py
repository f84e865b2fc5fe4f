# payments/services/order_payments.py

"""
======================================================
PATH: payments/services/order_payments.py
======================================================
ORDER PAYMENTS

- purchase order (must be FULFILLED) -> expense payment
- sale order (any status except PAID) -> income payment

paid total = sum of the order's direct payments (installments that settle
a credit payment are excluded, the credit row already counts).
When paid total reaches the order total the order becomes PAID.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping

from django.db import transaction
from django.db.models import Sum

from payments.models import Payment
from payments.services.credit_settlement import MESSAGE_FULLY_SETTLED, MESSAGE_PARTIAL
from payments.services.exceptions import OverpaymentError, PaymentValidationError
from payments.services.method_details import render_method_details
from payments.services.reference_numbers import issue_reference_number
from purchases.models import PurchaseOrder
from sales.models import SaleOrder

logger = logging.getLogger("payments")

TWOPLACES = Decimal("0.01")


@dataclass(frozen=True)
class OrderPaymentResult:
    payment: Payment
    order_number: str
    paid_total: Decimal
    remaining: Decimal
    fully_paid: bool

    @property
    def message(self) -> str:
        return MESSAGE_FULLY_SETTLED if self.fully_paid else MESSAGE_PARTIAL


def _money(v) -> Decimal:
    try:
        return Decimal(str(v if v is not None else "0.00")).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )
    except InvalidOperation as exc:
        raise PaymentValidationError("Amount must be a number") from exc


def order_paid_total(order) -> Decimal:
    total = order.payments.filter(settles__isnull=True).aggregate(s=Sum("amount"))["s"]
    return _money(total or 0)


def _order_total(order) -> Decimal:
    if isinstance(order, PurchaseOrder):
        return _money(order.total_amount)
    return _money(order.amount)


def order_remaining(order) -> Decimal:
    return _order_total(order) - order_paid_total(order)


def _record(
    *,
    order,
    link: dict,
    payment_type: str,
    amount,
    method: str,
    method_details: Mapping | None,
) -> OrderPaymentResult:
    amt = _money(amount)
    if amt <= Decimal("0.00"):
        raise PaymentValidationError("Amount must be a positive number.")

    left = order_remaining(order)
    if amt > left:
        raise OverpaymentError(remaining=left)

    method = (method or "").strip().lower()
    try:
        details = render_method_details(method, method_details)
    except ValueError as exc:
        raise PaymentValidationError(str(exc)) from exc

    payment = Payment.objects.create(
        **link,
        description=f"Payment for {order.order_number}",
        amount=amt,
        method=method,
        details=details,
        payment_type=payment_type,
        reference_number=issue_reference_number(),
    )

    paid_total = order_paid_total(order)
    remaining_after = _order_total(order) - paid_total
    fully_paid = remaining_after <= Decimal("0.00")

    if fully_paid:
        order.status = order.STATUS_PAID
        order.save(update_fields=["status"])

    logger.info(
        "Order payment recorded",
        extra={
            "order_number": order.order_number,
            "payment_id": str(payment.pk),
            "reference_number": payment.reference_number,
            "amount": str(amt),
            "fully_paid": fully_paid,
        },
    )

    return OrderPaymentResult(
        payment=payment,
        order_number=order.order_number,
        paid_total=paid_total,
        remaining=remaining_after,
        fully_paid=fully_paid,
    )


@transaction.atomic
def pay_purchase_order(*, order_id, amount, method, method_details=None) -> OrderPaymentResult:
    try:
        order = PurchaseOrder.objects.select_for_update().select_related("supplier").get(id=order_id)
    except PurchaseOrder.DoesNotExist as exc:
        raise PaymentValidationError("Purchase order not found") from exc

    if order.status == PurchaseOrder.STATUS_PAID:
        raise PaymentValidationError("Purchase order is already paid")
    if order.status != PurchaseOrder.STATUS_FULFILLED:
        raise PaymentValidationError(
            f"Only fulfilled purchase orders can be paid (status={order.status})"
        )

    return _record(
        order=order,
        link={"purchase_order": order},
        payment_type=Payment.PaymentType.EXPENSE,
        amount=amount,
        method=method,
        method_details=method_details,
    )


@transaction.atomic
def pay_sale_order(*, order_id, amount, method, method_details=None) -> OrderPaymentResult:
    try:
        order = SaleOrder.objects.select_for_update().select_related("customer").get(id=order_id)
    except SaleOrder.DoesNotExist as exc:
        raise PaymentValidationError("Sale order not found") from exc

    if order.status == SaleOrder.STATUS_PAID:
        raise PaymentValidationError("Sale order is already paid")

    return _record(
        order=order,
        link={"sale_order": order},
        payment_type=Payment.PaymentType.INCOME,
        amount=amount,
        method=method,
        method_details=method_details,
    )
