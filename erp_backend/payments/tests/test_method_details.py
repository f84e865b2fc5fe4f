# payments/tests/test_method_details.py

from datetime import date

from django.test import SimpleTestCase

from payments.services.method_details import missing_method_fields, render_method_details


class RenderMethodDetailsTests(SimpleTestCase):
    def test_card(self):
        self.assertEqual(
            render_method_details("card", {"card_last4": "1234"}),
            "Card ending in 1234",
        )

    def test_online(self):
        details = {
            "from_bank": "BOC",
            "from_account": "001",
            "to_bank": "HNB",
            "to_account": "999",
        }
        self.assertEqual(render_method_details("Online", details), "BOC (001) to HNB (999)")

    def test_cheque(self):
        details = {
            "cheque_bank": "Sampath",
            "cheque_number": "778812",
            "cheque_date": date(2024, 3, 1),
        }
        self.assertEqual(
            render_method_details("cheque", details),
            "Cheque #778812 from Sampath, dated 2024-03-01",
        )

    def test_cash_and_qr(self):
        self.assertEqual(render_method_details("cash", None), "N/A")
        self.assertEqual(render_method_details("QR", {"card_last4": "1111"}), "N/A")

    def test_unknown_method(self):
        with self.assertRaises(ValueError):
            render_method_details("barter", {})


class MissingMethodFieldsTests(SimpleTestCase):
    def test_card_needs_exactly_four(self):
        self.assertEqual(missing_method_fields("card", {}), ["card_last4"])
        self.assertEqual(missing_method_fields("card", {"card_last4": "123"}), ["card_last4"])
        self.assertEqual(missing_method_fields("card", {"card_last4": "1234"}), [])

    def test_online_lists_every_blank(self):
        self.assertEqual(
            missing_method_fields("online", {"from_bank": "BOC", "to_bank": " "}),
            ["from_account", "to_bank", "to_account"],
        )

    def test_cash_needs_nothing(self):
        self.assertEqual(missing_method_fields("cash", None), [])
