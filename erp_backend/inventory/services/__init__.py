"""
PATH: inventory/services/__init__.py

Inventory service exports.
"""

from .item_codes import next_item_code
from .stock_ledger import (
    StockLedger,
    StockMovement,
    build_stock_ledger,
    closing_balances,
    filter_movements,
    load_stock_ledger,
    reconcile_items,
)
from .stock_levels import StockSummary, filter_stock_items, summarize_stock

__all__ = [
    "StockLedger",
    "StockMovement",
    "StockSummary",
    "build_stock_ledger",
    "closing_balances",
    "filter_movements",
    "filter_stock_items",
    "load_stock_ledger",
    "next_item_code",
    "reconcile_items",
    "summarize_stock",
]
