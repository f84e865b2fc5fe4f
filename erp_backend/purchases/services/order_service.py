# purchases/services/order_service.py

"""
======================================================
PATH: purchases/services/order_service.py
======================================================
PURCHASE ORDER SERVICE

Lifecycle:
1) create_purchase_order   -> DRAFT, lines carry quantity only
2) mark_purchase_order_sent -> SENT
3) receive_purchase_order  -> FULFILLED
   - every line gets unit_price + total_value
   - total_amount = sum(total_value)
   - MasterItem.stock_level += quantity for every resolvable item_code
4) payments (payments.services.order_payments) move it to PAID

Only DRAFT orders can be edited or deleted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from inventory.models import MasterItem
from purchases.models import PurchaseOrder, PurchaseOrderLine, Supplier

logger = logging.getLogger("purchases")

TWOPLACES = Decimal("0.01")
ORDER_PREFIX = "PO"


class PurchaseOrderError(ValueError):
    pass


@dataclass(frozen=True)
class ReceiveResult:
    order: PurchaseOrder
    total_amount: Decimal
    restocked: dict[str, int]
    unknown_item_codes: tuple[str, ...]


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _sequence(number: str) -> int:
    _, _, tail = (number or "").partition("-")
    return int(tail) if tail.isdigit() else 0


def next_purchase_order_number() -> str:
    numbers = PurchaseOrder.objects.values_list("order_number", flat=True)
    highest = max((_sequence(n) for n in numbers), default=0)
    return f"{ORDER_PREFIX}-{highest + 1:03d}"


def _clean_lines(lines) -> list[tuple[str, int]]:
    cleaned = []
    for line in lines or []:
        code = (line.get("item_code") or "").strip()
        if not code:
            raise PurchaseOrderError("Item selection is required.")
        try:
            qty = int(line.get("quantity"))
        except (TypeError, ValueError):
            raise PurchaseOrderError("Quantity must be a positive number.")
        if qty <= 0:
            raise PurchaseOrderError("Quantity must be a positive number.")
        cleaned.append((code, qty))

    if not cleaned:
        raise PurchaseOrderError("Please add at least one item.")
    return cleaned


def _lock_order(order_id) -> PurchaseOrder:
    try:
        return (
            PurchaseOrder.objects.select_for_update()
            .select_related("supplier")
            .get(id=order_id)
        )
    except PurchaseOrder.DoesNotExist as exc:
        raise PurchaseOrderError("Purchase order not found") from exc


@transaction.atomic
def create_purchase_order(*, supplier_id, lines, order_date=None) -> PurchaseOrder:
    try:
        supplier = Supplier.objects.get(id=supplier_id)
    except Supplier.DoesNotExist as exc:
        raise PurchaseOrderError("Please select a supplier.") from exc

    cleaned = _clean_lines(lines)

    order = PurchaseOrder.objects.create(
        order_number=next_purchase_order_number(),
        supplier=supplier,
        date=order_date or timezone.localdate(),
        status=PurchaseOrder.STATUS_DRAFT,
        total_amount=Decimal("0.00"),
    )
    PurchaseOrderLine.objects.bulk_create(
        [PurchaseOrderLine(order=order, item_code=code, quantity=qty) for code, qty in cleaned]
    )

    logger.info(
        "Purchase order created",
        extra={"order_number": order.order_number, "lines": len(cleaned)},
    )
    return order


@transaction.atomic
def replace_purchase_order_lines(*, order_id, lines) -> PurchaseOrder:
    order = _lock_order(order_id)
    if order.status != PurchaseOrder.STATUS_DRAFT:
        raise PurchaseOrderError("Only draft purchase orders can be edited")

    cleaned = _clean_lines(lines)
    order.lines.all().delete()
    PurchaseOrderLine.objects.bulk_create(
        [PurchaseOrderLine(order=order, item_code=code, quantity=qty) for code, qty in cleaned]
    )
    order.total_amount = Decimal("0.00")
    order.save(update_fields=["total_amount"])
    return order


@transaction.atomic
def mark_purchase_order_sent(*, order_id) -> PurchaseOrder:
    order = _lock_order(order_id)
    if order.status != PurchaseOrder.STATUS_DRAFT:
        raise PurchaseOrderError(
            f"Only draft purchase orders can be sent (status={order.status})"
        )

    order.status = PurchaseOrder.STATUS_SENT
    order.sent_at = timezone.now()
    order.save(update_fields=["status", "sent_at"])

    logger.info("Purchase order sent", extra={"order_number": order.order_number})
    return order


@transaction.atomic
def delete_purchase_order(*, order_id) -> None:
    order = _lock_order(order_id)
    if order.status != PurchaseOrder.STATUS_DRAFT:
        raise PurchaseOrderError("Only draft purchase orders can be deleted")
    order.delete()


@transaction.atomic
def receive_purchase_order(*, order_id, prices) -> ReceiveResult:
    """
    Receive a SENT purchase order.

    prices: [{"line_id": <PurchaseOrderLine.id>, "unit_price": <Decimal>}, ...]
    Every line of the order must be priced.
    """
    order = _lock_order(order_id)

    if order.status != PurchaseOrder.STATUS_SENT:
        raise PurchaseOrderError(
            f"Only sent purchase orders can be received (status={order.status})"
        )

    price_by_line = {}
    for row in prices or []:
        unit_price = _money(row.get("unit_price"))
        if unit_price <= Decimal("0.00"):
            raise PurchaseOrderError("Unit price must be a positive number.")
        price_by_line[int(row.get("line_id"))] = unit_price

    lines = list(order.lines.all())
    missing = [line.id for line in lines if line.id not in price_by_line]
    if missing:
        raise PurchaseOrderError(f"Missing unit price for line(s): {missing}")

    total = Decimal("0.00")
    for line in lines:
        line.price(price_by_line[line.id])
        total += line.total_value
    PurchaseOrderLine.objects.bulk_update(lines, ["unit_price", "total_value"])

    order.status = PurchaseOrder.STATUS_FULFILLED
    order.total_amount = _money(total)
    order.received_at = timezone.now()
    order.save(update_fields=["status", "total_amount", "received_at"])

    restocked: dict[str, int] = {}
    unknown: list[str] = []
    for line in lines:
        updated = MasterItem.objects.filter(item_code=line.item_code).update(
            stock_level=F("stock_level") + line.quantity
        )
        if updated:
            restocked[line.item_code] = restocked.get(line.item_code, 0) + line.quantity
        else:
            unknown.append(line.item_code)

    if unknown:
        logger.warning(
            "Received lines reference unknown item codes; stock not updated",
            extra={"order_number": order.order_number, "item_codes": unknown},
        )

    logger.info(
        "Purchase order fulfilled",
        extra={"order_number": order.order_number, "total_amount": str(order.total_amount)},
    )

    return ReceiveResult(
        order=order,
        total_amount=order.total_amount,
        restocked=restocked,
        unknown_item_codes=tuple(unknown),
    )
