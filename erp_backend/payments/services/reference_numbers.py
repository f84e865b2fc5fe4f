# payments/services/reference_numbers.py

"""
======================================================
PATH: payments/services/reference_numbers.py
======================================================
DAY-SCOPED REFERENCE NUMBERS

Shape: YYYYMMDD + 6-digit zero-padded daily sequence (14 chars).
Lexicographic order == chronological order, so "highest number today" is a
plain range query.

Degraded mode:
- If the lookup fails the issuer still returns prefix + "000001".
  That number may collide with one already issued today. The failure is
  logged, never raised.

Not serialized: two concurrent issuances on the same day can read the same
"last" number and return the same value.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from django.db import DatabaseError, transaction
from django.utils import timezone

from payments.models import Payment
from payments.services.exceptions import PaymentServiceError

logger = logging.getLogger("payments")

DATE_FORMAT = "%Y%m%d"
PREFIX_LENGTH = 8
SEQUENCE_LENGTH = 6
REFERENCE_LENGTH = PREFIX_LENGTH + SEQUENCE_LENGTH
MAX_SEQUENCE = 10**SEQUENCE_LENGTH - 1


def reference_prefix(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def _highest_for_prefix(prefix: str) -> str | None:
    return (
        Payment.objects.filter(
            reference_number__gte=prefix + "0" * SEQUENCE_LENGTH,
            reference_number__lte=prefix + "9" * SEQUENCE_LENGTH,
        )
        .order_by("-reference_number")
        .values_list("reference_number", flat=True)
        .first()
    )


def issue_reference_number(today: date | None = None) -> str:
    day = today or timezone.localdate()
    prefix = reference_prefix(day)

    try:
        # Savepoint: a failed lookup must not abort the caller's transaction.
        with transaction.atomic():
            highest = _highest_for_prefix(prefix)
    except DatabaseError:
        logger.exception(
            "Reference number lookup failed; issuing default sequence",
            extra={"prefix": prefix},
        )
        return prefix + "1".zfill(SEQUENCE_LENGTH)

    if not highest:
        return prefix + "1".zfill(SEQUENCE_LENGTH)

    sequence = int(highest[PREFIX_LENGTH:]) + 1
    if sequence > MAX_SEQUENCE:
        raise PaymentServiceError(f"Daily reference numbers exhausted for {prefix}")

    return prefix + str(sequence).zfill(SEQUENCE_LENGTH)


def reference_number_problem(value) -> str | None:
    """Why `value` is not a well-formed reference number, or None when it is."""
    if not isinstance(value, str):
        return "Reference number must be a string"
    if len(value) != REFERENCE_LENGTH:
        return f"Reference number must be {REFERENCE_LENGTH} characters (got {len(value)})"
    if not (value.isascii() and value.isdigit()):
        return "Reference number must contain digits only"

    try:
        datetime.strptime(value[:PREFIX_LENGTH], DATE_FORMAT)
    except ValueError:
        return f"Reference number date {value[:PREFIX_LENGTH]} is not a calendar date"

    return None


def is_valid_reference_number(value) -> bool:
    return reference_number_problem(value) is None
