# company/services/profile.py

"""
COMPANY SETTINGS READS

The stock ledger only needs one company-wide value: the same-date ordering
policy. Reading it must not create the singleton row, so a fresh install falls
back to settings.DEFAULT_STOCK_ORDER_METHOD.
"""

from __future__ import annotations

from django.conf import settings

from company.models import CompanyProfile

VALID_STOCK_ORDER_METHODS = {choice for choice, _ in CompanyProfile.StockOrderMethod.choices}


def normalize_stock_order_method(value) -> str | None:
    """Return "FIFO" / "LIFO", or None when no policy is set."""
    method = (value or "").strip().upper()
    if not method:
        return None
    if method not in VALID_STOCK_ORDER_METHODS:
        raise ValueError(
            f"Invalid stock order method {value!r}. Valid: {sorted(VALID_STOCK_ORDER_METHODS)}"
        )
    return method


def get_stock_order_method() -> str | None:
    stored = (
        CompanyProfile.objects.filter(pk=1)
        .values_list("stock_order_method", flat=True)
        .first()
    )
    if stored is None:
        return normalize_stock_order_method(
            getattr(settings, "DEFAULT_STOCK_ORDER_METHOD", "")
        )
    return normalize_stock_order_method(stored)


def get_currency_code() -> str:
    stored = (
        CompanyProfile.objects.filter(pk=1)
        .values_list("currency_code", flat=True)
        .first()
    )
    return stored or "USD"
