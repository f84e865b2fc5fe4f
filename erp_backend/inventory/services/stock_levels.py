# inventory/services/stock_levels.py

"""
STOCK LEVEL SUMMARY

- Filter by item type ("all" / RAW_MATERIAL / FINISHED_GOOD) and free text
  (case-insensitive substring on name or item code).
- total_count = sum(stock_level); total_value = sum(stock_level * unit_price)
  over the filtered set. Items with no movements still count.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

TWOPLACES = Decimal("0.01")

ALL_TYPES = "all"


@dataclass(frozen=True)
class StockSummary:
    item_count: int
    total_count: int
    total_value: Decimal


def filter_stock_items(items: Iterable, *, item_type: str = ALL_TYPES, search: str = "") -> list:
    wanted_type = (item_type or ALL_TYPES).strip()
    term = (search or "").strip().lower()

    selected = []
    for item in items:
        if wanted_type != ALL_TYPES and item.item_type != wanted_type:
            continue
        if term and term not in item.name.lower() and term not in item.item_code.lower():
            continue
        selected.append(item)
    return selected


def summarize_stock(items: Iterable) -> StockSummary:
    item_count = 0
    total_count = 0
    total_value = Decimal("0.00")

    for item in items:
        level = int(item.stock_level or 0)
        item_count += 1
        total_count += level
        total_value += Decimal(level) * Decimal(str(item.unit_price or "0.00"))

    return StockSummary(
        item_count=item_count,
        total_count=total_count,
        total_value=total_value.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
    )
