# payments/services/method_details.py

"""
Free-text `details` for a payment, rendered from method-specific fields.

card   -> card_last4
online -> from_bank, from_account, to_bank, to_account
cheque -> cheque_bank, cheque_number, cheque_date
cash / qr / credit -> no fields
"""

from __future__ import annotations

from typing import Mapping

from payments.models import Payment

NOT_APPLICABLE = "N/A"

REQUIRED_FIELDS = {
    Payment.Method.CARD: ("card_last4",),
    Payment.Method.ONLINE: ("from_bank", "from_account", "to_bank", "to_account"),
    Payment.Method.CHEQUE: ("cheque_bank", "cheque_number", "cheque_date"),
    Payment.Method.CASH: (),
    Payment.Method.QR: (),
    Payment.Method.CREDIT: (),
}


def _method(value) -> str:
    method = (value or "").strip().lower()
    if method not in REQUIRED_FIELDS:
        raise ValueError(f"Unknown payment method: {value!r}")
    return method


def _text(details: Mapping | None, field: str) -> str:
    return str((details or {}).get(field) or "").strip()


def missing_method_fields(method, details: Mapping | None) -> list[str]:
    method = _method(method)
    missing = [f for f in REQUIRED_FIELDS[method] if not _text(details, f)]

    if method == Payment.Method.CARD and not missing and len(_text(details, "card_last4")) != 4:
        missing.append("card_last4")

    return missing


def render_method_details(method, details: Mapping | None) -> str:
    method = _method(method)
    d = {f: _text(details, f) for f in REQUIRED_FIELDS[method]}

    if method == Payment.Method.CARD:
        return f"Card ending in {d['card_last4']}"
    if method == Payment.Method.ONLINE:
        return (
            f"{d['from_bank']} ({d['from_account']}) "
            f"to {d['to_bank']} ({d['to_account']})"
        )
    if method == Payment.Method.CHEQUE:
        return f"Cheque #{d['cheque_number']} from {d['cheque_bank']}, dated {d['cheque_date']}"

    return NOT_APPLICABLE
