# sales/services/quotation_service.py

"""
======================================================
PATH: sales/services/quotation_service.py
======================================================
QUOTATION SERVICE

Lifecycle:
    DRAFT -> SENT -> APPROVED -> CONVERTED
                  -> REJECTED

Conversion (APPROVED -> CONVERTED) is all-or-nothing:
- every line must resolve to a MasterItem with enough stock_level
- stock_level -= quantity for every line
- a SaleOrder "SO-<quotation sequence>" is created with copied lines,
  status PROCESSING
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from inventory.models import MasterItem
from sales.models import Customer, Quotation, QuotationLine, SaleOrder, SaleOrderLine

logger = logging.getLogger("sales")

TWOPLACES = Decimal("0.01")
QUOTATION_PREFIX = "QUO"
SALE_ORDER_PREFIX = "SO"

ALLOWED_TRANSITIONS = {
    Quotation.STATUS_DRAFT: {Quotation.STATUS_SENT},
    Quotation.STATUS_SENT: {Quotation.STATUS_APPROVED, Quotation.STATUS_REJECTED},
}

EDITABLE_STATUSES = frozenset({Quotation.STATUS_DRAFT, Quotation.STATUS_REJECTED})


class SalesServiceError(ValueError):
    pass


class InsufficientStockError(SalesServiceError):
    def __init__(self, item_code: str, required: int, available: int | None):
        self.item_code = item_code
        self.required = required
        self.available = available
        if available is None:
            msg = f"Item {item_code} not found in stock."
        else:
            msg = (
                f"Not enough stock for {item_code}. "
                f"Required: {required}, Available: {available}"
            )
        super().__init__(msg)


@dataclass(frozen=True)
class ConversionResult:
    quotation: Quotation
    sale_order: SaleOrder
    allocated: dict[str, int]


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _sequence(number: str) -> int:
    _, _, tail = (number or "").partition("-")
    return int(tail) if tail.isdigit() else 0


def next_quotation_number() -> str:
    numbers = Quotation.objects.values_list("quotation_number", flat=True)
    highest = max((_sequence(n) for n in numbers), default=0)
    return f"{QUOTATION_PREFIX}-{highest + 1:03d}"


def sale_order_number_for(quotation: Quotation) -> str:
    _, _, tail = quotation.quotation_number.partition("-")
    return f"{SALE_ORDER_PREFIX}-{tail}"


def _clean_lines(lines) -> list[tuple[str, int, Decimal]]:
    cleaned = []
    for line in lines or []:
        code = (line.get("item_code") or "").strip()
        if not code:
            raise SalesServiceError("Item selection is required.")
        try:
            qty = int(line.get("quantity"))
        except (TypeError, ValueError):
            raise SalesServiceError("Quantity must be a positive number.")
        if qty <= 0:
            raise SalesServiceError("Quantity must be a positive number.")
        price = _money(line.get("unit_price"))
        if price <= Decimal("0.00"):
            raise SalesServiceError("Unit price must be a positive number.")
        cleaned.append((code, qty, price))

    if not cleaned:
        raise SalesServiceError("Please add at least one item.")
    return cleaned


def _write_lines(quotation: Quotation, cleaned) -> Decimal:
    total = Decimal("0.00")
    for code, qty, price in cleaned:
        line = QuotationLine.objects.create(
            quotation=quotation, item_code=code, quantity=qty, unit_price=price
        )
        total += line.total_value
    return _money(total)


def _get_customer(customer_id) -> Customer:
    try:
        return Customer.objects.get(id=customer_id)
    except Customer.DoesNotExist as exc:
        raise SalesServiceError("Please select a customer.") from exc


def _lock_quotation(quotation_id) -> Quotation:
    try:
        return (
            Quotation.objects.select_for_update()
            .select_related("customer")
            .get(id=quotation_id)
        )
    except Quotation.DoesNotExist as exc:
        raise SalesServiceError("Quotation not found") from exc


@transaction.atomic
def create_quotation(*, customer_id, lines, quotation_date=None) -> Quotation:
    customer = _get_customer(customer_id)
    cleaned = _clean_lines(lines)

    quotation = Quotation.objects.create(
        quotation_number=next_quotation_number(),
        customer=customer,
        date=quotation_date or timezone.localdate(),
        status=Quotation.STATUS_DRAFT,
    )
    quotation.amount = _write_lines(quotation, cleaned)
    quotation.save(update_fields=["amount"])

    logger.info(
        "Quotation created",
        extra={"quotation_number": quotation.quotation_number, "amount": str(quotation.amount)},
    )
    return quotation


@transaction.atomic
def update_quotation(*, quotation_id, lines, customer_id=None) -> Quotation:
    """Replace lines (and optionally the customer). The quotation goes back to DRAFT."""
    quotation = _lock_quotation(quotation_id)
    if quotation.status not in EDITABLE_STATUSES:
        raise SalesServiceError(
            f"Quotation cannot be edited (status={quotation.status})"
        )

    cleaned = _clean_lines(lines)
    if customer_id is not None:
        quotation.customer = _get_customer(customer_id)

    quotation.lines.all().delete()
    quotation.amount = _write_lines(quotation, cleaned)
    quotation.status = Quotation.STATUS_DRAFT
    quotation.save(update_fields=["customer", "amount", "status"])
    return quotation


@transaction.atomic
def change_quotation_status(*, quotation_id, status: str) -> Quotation:
    quotation = _lock_quotation(quotation_id)
    target = (status or "").strip().upper()

    if target == Quotation.STATUS_CONVERTED:
        raise SalesServiceError("Use conversion to turn a quotation into a sale order")

    if target not in ALLOWED_TRANSITIONS.get(quotation.status, set()):
        raise SalesServiceError(
            f"Invalid status change {quotation.status} -> {target or '<empty>'}"
        )

    quotation.status = target
    quotation.save(update_fields=["status"])

    logger.info(
        "Quotation status changed",
        extra={"quotation_number": quotation.quotation_number, "status": target},
    )
    return quotation


@transaction.atomic
def delete_quotation(*, quotation_id) -> None:
    quotation = _lock_quotation(quotation_id)
    if quotation.status not in EDITABLE_STATUSES:
        raise SalesServiceError("Only draft or rejected quotations can be deleted")
    quotation.delete()


@transaction.atomic
def convert_quotation(*, quotation_id) -> ConversionResult:
    quotation = _lock_quotation(quotation_id)

    if quotation.status != Quotation.STATUS_APPROVED:
        raise SalesServiceError(
            f"Only approved quotations can be converted (status={quotation.status})"
        )

    lines = list(quotation.lines.all())
    codes = {line.item_code for line in lines}
    items = {
        item.item_code: item
        for item in MasterItem.objects.select_for_update().filter(item_code__in=codes)
    }

    # Check every line before touching stock.
    required: dict[str, int] = {}
    for line in lines:
        required[line.item_code] = required.get(line.item_code, 0) + line.quantity
    for code, qty in required.items():
        item = items.get(code)
        if item is None:
            raise InsufficientStockError(code, qty, None)
        if item.stock_level < qty:
            raise InsufficientStockError(code, qty, item.stock_level)

    order_number = sale_order_number_for(quotation)
    if SaleOrder.objects.filter(order_number=order_number).exists():
        raise SalesServiceError(f"Sale order {order_number} already exists")

    for code, qty in required.items():
        MasterItem.objects.filter(pk=items[code].pk).update(
            stock_level=F("stock_level") - qty
        )

    order = SaleOrder.objects.create(
        order_number=order_number,
        customer=quotation.customer,
        quotation=quotation,
        date=timezone.localdate(),
        status=SaleOrder.STATUS_PROCESSING,
        amount=quotation.amount,
    )
    for line in lines:
        SaleOrderLine.objects.create(
            order=order,
            item_code=line.item_code,
            quantity=line.quantity,
            unit_price=line.unit_price,
        )

    quotation.status = Quotation.STATUS_CONVERTED
    quotation.save(update_fields=["status"])

    logger.info(
        "Quotation converted",
        extra={
            "quotation_number": quotation.quotation_number,
            "order_number": order.order_number,
            "allocated": required,
        },
    )
    return ConversionResult(quotation=quotation, sale_order=order, allocated=required)
