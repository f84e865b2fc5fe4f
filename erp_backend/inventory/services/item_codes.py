# inventory/services/item_codes.py

"""
ITEM CODE ISSUING

RM-001, RM-002, ... for raw materials; FI-001, ... for finished goods.
Next number = highest existing number for the prefix + 1.
"""

from __future__ import annotations

from inventory.models import MasterItem

ITEM_CODE_PREFIXES = {
    MasterItem.ItemType.RAW_MATERIAL: "RM",
    MasterItem.ItemType.FINISHED_GOOD: "FI",
}


def _code_number(code: str) -> int:
    _, _, tail = (code or "").partition("-")
    return int(tail) if tail.isdigit() else 0


def next_item_code(item_type: str) -> str:
    try:
        prefix = ITEM_CODE_PREFIXES[item_type]
    except KeyError as exc:
        raise ValueError(f"Unknown item type: {item_type!r}") from exc

    codes = MasterItem.objects.filter(item_code__startswith=f"{prefix}-").values_list(
        "item_code", flat=True
    )
    highest = max((_code_number(c) for c in codes), default=0)
    return f"{prefix}-{highest + 1:03d}"
