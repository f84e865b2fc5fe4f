# inventory/services/stock_ledger.py

"""
STOCK LEDGER ENGINE

Purpose:
- Rebuild a per-item chronological stock ledger from order history.
- Stock IN  = received purchase order lines (FULFILLED, or PAID after receiving).
- Stock OUT = sale order lines (every sale order, no status gate).

Ordering (two separate orders, both significant):
- WALK order: date ascending; same-date tie-break by company policy
    FIFO -> purchase receipts before sales
    LIFO -> sales before purchase receipts
    None -> encounter order (all purchase orders, then all sale orders)
  Running balances are accumulated in walk order.
- DISPLAY order: the walked list re-sorted by date ascending
  (descending under LIFO). Same-date rows keep their walk order.

Balance rules:
- Each item's running balance is seeded with its CURRENT MasterItem.stock_level
  the first time the walk meets that item. stock_level already reflects
  received/sold quantities, so balances double-count history. Kept as-is
  because no historical opening-balance field exists.
- Negative balances are reported unclamped.
- Order lines whose item_code resolves to no MasterItem are skipped silently.

The builder is pure (no ORM). load_stock_ledger() is the DB-backed entrypoint.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

logger = logging.getLogger("inventory")

POLICY_FIFO = "FIFO"
POLICY_LIFO = "LIFO"

KIND_PO = "PO"
KIND_SO = "SO"

# Purchase order statuses that mean "goods were received".
RECEIVED_PO_STATUSES = frozenset({"FULFILLED", "PAID"})


# ============================================================
# INPUT / OUTPUT SHAPES
# ============================================================

@dataclass(frozen=True)
class LedgerItem:
    item_code: str
    name: str
    stock_level: int


@dataclass(frozen=True)
class LedgerLine:
    item_code: str
    quantity: int


@dataclass(frozen=True)
class LedgerOrder:
    ref_id: str
    date: date
    lines: tuple[LedgerLine, ...]
    status: str = ""


@dataclass(frozen=True)
class StockMovement:
    date: date
    item_code: str
    item_name: str
    ref_id: str
    kind: str
    in_qty: int
    out_qty: int
    balance: int


@dataclass(frozen=True)
class ItemReconciliation:
    item_code: str
    item_name: str
    stock_level: int
    ledger_balance: int
    movement_count: int

    @property
    def difference(self) -> int:
        return self.ledger_balance - self.stock_level


@dataclass(frozen=True)
class StockLedger:
    policy: str | None
    walk: tuple[StockMovement, ...]
    movements: tuple[StockMovement, ...]

    def for_item(self, item_code: str) -> list[StockMovement]:
        return [m for m in self.movements if m.item_code == item_code]

    def closing_balances(self) -> dict[str, int]:
        return closing_balances(self.walk)


# ============================================================
# PURE BUILDER
# ============================================================

def closing_balances(walk: Iterable[StockMovement]) -> dict[str, int]:
    """Balance after each item's last movement. `walk` must be in walk order."""
    balances: dict[str, int] = {}
    for m in walk:
        balances[m.item_code] = m.balance
    return balances


def _normalize_policy(policy) -> str | None:
    value = (policy or "").strip().upper()
    if value in (POLICY_FIFO, POLICY_LIFO):
        return value
    if value:
        raise ValueError(f"Unknown stock ordering policy: {policy!r}")
    return None


def _index_items(items: Iterable[LedgerItem]) -> dict[str, LedgerItem]:
    # First record wins when codes repeat.
    indexed: dict[str, LedgerItem] = {}
    for item in items:
        indexed.setdefault(item.item_code, item)
    return indexed


def _raw_movements(
    *,
    items_by_code: dict[str, LedgerItem],
    purchase_orders: Sequence[LedgerOrder],
    sale_orders: Sequence[LedgerOrder],
) -> list[StockMovement]:
    raw: list[StockMovement] = []
    skipped = 0

    for po in purchase_orders:
        if (po.status or "").upper() not in RECEIVED_PO_STATUSES:
            continue
        for line in po.lines:
            item = items_by_code.get(line.item_code)
            if item is None:
                skipped += 1
                continue
            raw.append(
                StockMovement(
                    date=po.date,
                    item_code=line.item_code,
                    item_name=item.name,
                    ref_id=po.ref_id,
                    kind=KIND_PO,
                    in_qty=int(line.quantity),
                    out_qty=0,
                    balance=0,
                )
            )

    for so in sale_orders:
        for line in so.lines:
            item = items_by_code.get(line.item_code)
            if item is None:
                skipped += 1
                continue
            raw.append(
                StockMovement(
                    date=so.date,
                    item_code=line.item_code,
                    item_name=item.name,
                    ref_id=so.ref_id,
                    kind=KIND_SO,
                    in_qty=0,
                    out_qty=int(line.quantity),
                    balance=0,
                )
            )

    if skipped:
        logger.debug(
            "Stock ledger skipped order lines with unknown item codes",
            extra={"skipped_lines": skipped},
        )

    return raw


def _walk_key(policy: str | None):
    if policy == POLICY_FIFO:
        first = KIND_PO
    elif policy == POLICY_LIFO:
        first = KIND_SO
    else:
        return lambda m: m.date

    return lambda m: (m.date, 0 if m.kind == first else 1)


def build_stock_ledger(
    *,
    items: Iterable[LedgerItem],
    purchase_orders: Sequence[LedgerOrder],
    sale_orders: Sequence[LedgerOrder],
    ordering_policy: str | None = None,
) -> StockLedger:
    policy = _normalize_policy(ordering_policy)
    items_by_code = _index_items(items)

    raw = _raw_movements(
        items_by_code=items_by_code,
        purchase_orders=purchase_orders,
        sale_orders=sale_orders,
    )

    # sorted() is stable: equal keys keep encounter order
    walk_order = sorted(raw, key=_walk_key(policy))

    balances: dict[str, int] = {}
    walked: list[StockMovement] = []
    for m in walk_order:
        if m.item_code not in balances:
            balances[m.item_code] = int(items_by_code[m.item_code].stock_level or 0)

        balance_after = balances[m.item_code] + m.in_qty - m.out_qty
        balances[m.item_code] = balance_after
        walked.append(
            StockMovement(
                date=m.date,
                item_code=m.item_code,
                item_name=m.item_name,
                ref_id=m.ref_id,
                kind=m.kind,
                in_qty=m.in_qty,
                out_qty=m.out_qty,
                balance=balance_after,
            )
        )

    display = sorted(walked, key=lambda m: m.date, reverse=(policy == POLICY_LIFO))

    return StockLedger(policy=policy, walk=tuple(walked), movements=tuple(display))


def filter_movements(movements: Iterable[StockMovement], search: str = "") -> list[StockMovement]:
    """Case-insensitive substring match on item code, item name or reference id."""
    term = (search or "").strip().lower()
    if not term:
        return list(movements)

    return [
        m
        for m in movements
        if term in m.item_code.lower()
        or term in m.item_name.lower()
        or term in m.ref_id.lower()
    ]


def reconcile_items(items: Iterable[LedgerItem], ledger: StockLedger) -> list[ItemReconciliation]:
    """
    Compare each item's stored stock_level with the ledger's closing balance.
    Items without movements reconcile to their stored level.
    """
    closing = ledger.closing_balances()
    counts: dict[str, int] = defaultdict(int)
    for m in ledger.walk:
        counts[m.item_code] += 1

    rows = []
    for item in _index_items(items).values():
        level = int(item.stock_level or 0)
        rows.append(
            ItemReconciliation(
                item_code=item.item_code,
                item_name=item.name,
                stock_level=level,
                ledger_balance=closing.get(item.item_code, level),
                movement_count=counts.get(item.item_code, 0),
            )
        )
    return rows


# ============================================================
# DB-BACKED ENTRYPOINT
# ============================================================

USE_COMPANY_POLICY = object()


def load_ledger_items() -> list[LedgerItem]:
    from inventory.models import MasterItem

    return [
        LedgerItem(item_code=code, name=name, stock_level=level)
        for code, name, level in MasterItem.objects.order_by("item_code").values_list(
            "item_code", "name", "stock_level"
        )
    ]


def _ledger_orders(qs, *, number_field: str) -> list[LedgerOrder]:
    orders = []
    for order in qs:
        orders.append(
            LedgerOrder(
                ref_id=getattr(order, number_field),
                date=order.date,
                status=order.status,
                lines=tuple(
                    LedgerLine(item_code=line.item_code, quantity=line.quantity)
                    for line in order.lines.all()
                ),
            )
        )
    return orders


def load_stock_ledger(*, ordering_policy=USE_COMPANY_POLICY) -> StockLedger:
    """
    Read items + orders from the database and build the ledger.

    ordering_policy:
    - omitted -> company profile's stock_order_method
    - "FIFO" / "LIFO" / None -> explicit override
    """
    # Import locally to avoid app-level circular imports at module load time.
    from company.services.profile import get_stock_order_method
    from purchases.models import PurchaseOrder
    from sales.models import SaleOrder

    if ordering_policy is USE_COMPANY_POLICY:
        ordering_policy = get_stock_order_method()

    purchase_orders = _ledger_orders(
        PurchaseOrder.objects.filter(status__in=RECEIVED_PO_STATUSES)
        .prefetch_related("lines")
        .order_by("created_at", "order_number"),
        number_field="order_number",
    )
    sale_orders = _ledger_orders(
        SaleOrder.objects.prefetch_related("lines").order_by("created_at", "order_number"),
        number_field="order_number",
    )

    ledger = build_stock_ledger(
        items=load_ledger_items(),
        purchase_orders=purchase_orders,
        sale_orders=sale_orders,
        ordering_policy=ordering_policy,
    )

    logger.info(
        "Stock ledger rebuilt",
        extra={
            "policy": ledger.policy,
            "movements": len(ledger.movements),
            "purchase_orders": len(purchase_orders),
            "sale_orders": len(sale_orders),
        },
    )
    return ledger
