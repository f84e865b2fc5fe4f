# payments/services/credit_listing.py

"""
Credit payments (method == "credit") for the creditors / debtors views.

payment_type:
  expense -> creditors (we owe; purchase on credit)
  income  -> debtors (we are owed)
search matches counterparty name, order reference (or "ad-hoc"), details.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from django.utils import timezone

from payments.models import Payment

PERIOD_ALL = "all"
PERIOD_TODAY = "today"
PERIOD_WEEK = "week"
PERIOD_MONTH = "month"

PERIODS = (PERIOD_ALL, PERIOD_TODAY, PERIOD_WEEK, PERIOD_MONTH)


@dataclass(frozen=True)
class CreditRow:
    payment: Payment
    counterparty: str
    reference: str
    paid_amount: Decimal
    remaining: Decimal

    @property
    def is_settled(self) -> bool:
        return self.remaining <= Decimal("0.00")


def _period_start(period: str, today: date) -> date | None:
    if period == PERIOD_TODAY:
        return today
    if period == PERIOD_WEEK:
        return today - timedelta(days=today.weekday())
    if period == PERIOD_MONTH:
        return today.replace(day=1)
    return None


def credit_payments(
    *,
    payment_type: str | None = None,
    period: str = PERIOD_ALL,
    date_from: date | None = None,
    date_to: date | None = None,
):
    qs = (
        Payment.objects.filter(method=Payment.Method.CREDIT)
        .select_related("purchase_order__supplier", "sale_order__customer")
        .order_by("-date", "-created_at")
    )
    if payment_type:
        qs = qs.filter(payment_type=payment_type)

    start = _period_start(period, timezone.localdate())
    if start is not None:
        qs = qs.filter(date__gte=start)
    if date_from is not None:
        qs = qs.filter(date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(date__lte=date_to)
    return qs


def credit_rows(payments: Iterable[Payment], *, search: str = "", counterparty: str = "") -> list[CreditRow]:
    term = (search or "").strip().lower()
    name_filter = (counterparty or "").strip()

    rows = []
    for p in payments:
        name = p.counterparty_name
        reference = p.order_reference or "ad-hoc"

        if name_filter and name != name_filter:
            continue
        if term and not (
            term in name.lower() or term in reference.lower() or term in (p.details or "").lower()
        ):
            continue

        paid = p.paid_amount or Decimal("0.00")
        rows.append(
            CreditRow(
                payment=p,
                counterparty=name,
                reference=reference,
                paid_amount=paid,
                remaining=p.amount - paid,
            )
        )
    return rows
