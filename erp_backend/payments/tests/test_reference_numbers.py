# payments/tests/test_reference_numbers.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError, transaction
from django.test import SimpleTestCase, TestCase

from payments.models import Payment
from payments.services.exceptions import PaymentServiceError
from payments.services.reference_numbers import (
    is_valid_reference_number,
    issue_reference_number,
    reference_number_problem,
)


def _store(reference_number):
    return Payment.objects.create(
        description="Sundry",
        amount=Decimal("1.00"),
        method=Payment.Method.CASH,
        payment_type=Payment.PaymentType.EXPENSE,
        reference_number=reference_number,
    )


class ReferenceNumberIssuerTests(TestCase):
    DAY = date(2024, 1, 15)

    def test_first_number_of_the_day(self):
        self.assertEqual(issue_reference_number(today=self.DAY), "20240115000001")

    def test_sequential_issuance_is_monotonic(self):
        issued = []
        for _ in range(5):
            ref = issue_reference_number(today=self.DAY)
            _store(ref)
            issued.append(ref)

        self.assertEqual(issued, [f"20240115{n:06d}" for n in range(1, 6)])

    def test_other_days_do_not_affect_sequence(self):
        _store("20240114000042")
        _store("20240116000007")
        _store("")

        self.assertEqual(issue_reference_number(today=self.DAY), "20240115000001")

    def test_continues_after_highest(self):
        _store("20240115000009")
        _store("20240115000123")
        self.assertEqual(issue_reference_number(today=self.DAY), "20240115000124")

    def test_exhausted_day_raises(self):
        _store("20240115999999")
        with self.assertRaises(PaymentServiceError):
            issue_reference_number(today=self.DAY)

    def test_lookup_failure_degrades_to_first_sequence(self):
        _store("20240115000005")

        with mock.patch(
            "payments.services.reference_numbers._highest_for_prefix",
            side_effect=DatabaseError("down"),
        ):
            with self.assertLogs("payments", level="ERROR") as logs:
                ref = issue_reference_number(today=self.DAY)

        self.assertEqual(ref, "20240115000001")
        self.assertIn("Reference number lookup failed", logs.output[0])

    def test_lookup_failure_keeps_enclosing_transaction_usable(self):
        # A failed query leaves the transaction unusable, as Postgres does.
        def aborted_lookup(prefix):
            transaction.set_rollback(True)
            raise DatabaseError("current transaction is aborted")

        with mock.patch(
            "payments.services.reference_numbers._highest_for_prefix",
            side_effect=aborted_lookup,
        ):
            with self.assertLogs("payments", level="ERROR"):
                with transaction.atomic():
                    ref = issue_reference_number(today=self.DAY)
                    payment = _store(ref)

        self.assertEqual(ref, "20240115000001")
        self.assertTrue(Payment.objects.filter(pk=payment.pk).exists())


class ReferenceNumberFormatTests(SimpleTestCase):
    def test_accepts_well_formed(self):
        self.assertTrue(is_valid_reference_number("20240115000123"))
        self.assertTrue(is_valid_reference_number("20240229000001"))

    def test_rejects_wrong_length(self):
        self.assertFalse(is_valid_reference_number("2024011500012"))
        self.assertFalse(is_valid_reference_number("202401150001234"))

    def test_rejects_bad_dates(self):
        self.assertFalse(is_valid_reference_number("20241315000001"))
        self.assertFalse(is_valid_reference_number("20230229000001"))
        self.assertFalse(is_valid_reference_number("20240132000001"))

    def test_rejects_non_digits(self):
        self.assertFalse(is_valid_reference_number("abcd0115000001"))
        self.assertFalse(is_valid_reference_number("2024011500000١"))
        self.assertFalse(is_valid_reference_number(None))

    def test_problem_explains_rejection(self):
        self.assertIsNone(reference_number_problem("20240115000123"))
        self.assertIn("14 characters", reference_number_problem("2024011500012"))
        self.assertIn("not a calendar date", reference_number_problem("20241315000001"))
