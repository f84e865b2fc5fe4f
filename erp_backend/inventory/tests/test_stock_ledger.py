# inventory/tests/test_stock_ledger.py

from datetime import date

from django.test import SimpleTestCase

from inventory.services.stock_ledger import (
    KIND_PO,
    KIND_SO,
    LedgerItem,
    LedgerLine,
    LedgerOrder,
    build_stock_ledger,
    closing_balances,
    filter_movements,
    reconcile_items,
)


def po(ref, day, *lines, status="FULFILLED"):
    return LedgerOrder(
        ref_id=ref,
        date=day,
        status=status,
        lines=tuple(LedgerLine(item_code=c, quantity=q) for c, q in lines),
    )


def so(ref, day, *lines, status="PROCESSING"):
    return LedgerOrder(
        ref_id=ref,
        date=day,
        status=status,
        lines=tuple(LedgerLine(item_code=c, quantity=q) for c, q in lines),
    )


D1 = date(2024, 5, 10)
D2 = date(2024, 5, 12)


class StockLedgerEngineTests(SimpleTestCase):
    """
    GUARANTEES:
    - Final balance = starting stock_level + sum(in) - sum(out) in walk order
    - Same-date ties follow the ordering policy
    - Unknown item codes never appear and never fail the build
    """

    WOOD = LedgerItem(item_code="WD-001", name="Wood", stock_level=150)

    # ---------------------------------------------------------
    # Basic walk
    # ---------------------------------------------------------

    def test_receipt_then_sale(self):
        for policy in ("FIFO", "LIFO"):
            ledger = build_stock_ledger(
                items=[self.WOOD],
                purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
                sale_orders=[so("SO-001", D2, ("WD-001", 10))],
                ordering_policy=policy,
            )
            self.assertEqual([m.balance for m in ledger.walk], [180, 170])

        fifo = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
            sale_orders=[so("SO-001", D2, ("WD-001", 10))],
            ordering_policy="FIFO",
        )
        first, second = fifo.movements
        self.assertEqual((first.ref_id, first.kind, first.in_qty, first.out_qty), ("PO-001", KIND_PO, 30, 0))
        self.assertEqual((second.ref_id, second.kind, second.in_qty, second.out_qty), ("SO-001", KIND_SO, 0, 10))
        self.assertEqual(first.item_name, "Wood")

    def test_only_received_purchase_orders_count(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[
                po("PO-001", D1, ("WD-001", 5), status="DRAFT"),
                po("PO-002", D1, ("WD-001", 7), status="SENT"),
                po("PO-003", D1, ("WD-001", 11), status="PAID"),
                po("PO-004", D1, ("WD-001", 13), status="FULFILLED"),
            ],
            sale_orders=[],
        )
        self.assertEqual([m.ref_id for m in ledger.walk], ["PO-003", "PO-004"])
        self.assertEqual(ledger.walk[-1].balance, 174)

    def test_sale_orders_have_no_status_gate(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[],
            sale_orders=[
                so("SO-001", D1, ("WD-001", 1), status="PROCESSING"),
                so("SO-002", D1, ("WD-001", 1), status="SHIPPED"),
                so("SO-003", D1, ("WD-001", 1), status="PAID"),
            ],
        )
        self.assertEqual(len(ledger.walk), 3)

    def test_unknown_item_codes_are_skipped(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D1, ("XX-404", 99), ("WD-001", 1))],
            sale_orders=[so("SO-001", D2, ("XX-404", 3))],
        )
        self.assertEqual([m.item_code for m in ledger.walk], ["WD-001"])

    def test_negative_balances_are_not_clamped(self):
        item = LedgerItem(item_code="FI-001", name="Chair", stock_level=2)
        ledger = build_stock_ledger(
            items=[item],
            purchase_orders=[],
            sale_orders=[so("SO-001", D1, ("FI-001", 5))],
        )
        self.assertEqual(ledger.walk[0].balance, -3)

    def test_each_item_has_its_own_balance(self):
        glue = LedgerItem(item_code="GL-001", name="Glue", stock_level=0)
        ledger = build_stock_ledger(
            items=[self.WOOD, glue],
            purchase_orders=[po("PO-001", D1, ("WD-001", 10), ("GL-001", 4))],
            sale_orders=[so("SO-001", D2, ("GL-001", 1), ("WD-001", 5))],
        )
        self.assertEqual(closing_balances(ledger.walk), {"WD-001": 155, "GL-001": 3})
        self.assertEqual([m.balance for m in ledger.for_item("GL-001")], [4, 3])

    # ---------------------------------------------------------
    # Same-date tie-break
    # ---------------------------------------------------------

    def _same_day(self, policy):
        return build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
            sale_orders=[so("SO-001", D1, ("WD-001", 10))],
            ordering_policy=policy,
        )

    def test_fifo_receipts_first(self):
        ledger = self._same_day("FIFO")
        self.assertEqual([(m.kind, m.balance) for m in ledger.walk], [(KIND_PO, 180), (KIND_SO, 170)])

    def test_lifo_sales_first(self):
        ledger = self._same_day("LIFO")
        self.assertEqual([(m.kind, m.balance) for m in ledger.walk], [(KIND_SO, 140), (KIND_PO, 170)])

    def test_no_policy_keeps_encounter_order(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
            sale_orders=[so("SO-001", D1, ("WD-001", 10))],
            ordering_policy=None,
        )
        self.assertIsNone(ledger.policy)
        self.assertEqual([m.kind for m in ledger.walk], [KIND_PO, KIND_SO])

    def test_dates_win_over_policy(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D2, ("WD-001", 30))],
            sale_orders=[so("SO-001", D1, ("WD-001", 10))],
            ordering_policy="FIFO",
        )
        self.assertEqual([m.ref_id for m in ledger.walk], ["SO-001", "PO-001"])

    def test_unknown_policy_rejected(self):
        with self.assertRaises(ValueError):
            self._same_day("AVG")

    # ---------------------------------------------------------
    # Display order
    # ---------------------------------------------------------

    def test_lifo_displays_newest_first(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
            sale_orders=[so("SO-001", D2, ("WD-001", 10))],
            ordering_policy="LIFO",
        )
        self.assertEqual([m.ref_id for m in ledger.walk], ["PO-001", "SO-001"])
        self.assertEqual([m.ref_id for m in ledger.movements], ["SO-001", "PO-001"])
        # balances belong to the walk, not the display
        self.assertEqual([m.balance for m in ledger.movements], [170, 180])

    def test_fifo_displays_oldest_first(self):
        ledger = self._same_day("FIFO")
        self.assertEqual([m.ref_id for m in ledger.movements], ["PO-001", "SO-001"])

    def test_final_balance_property(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[
                po("PO-001", D1, ("WD-001", 30)),
                po("PO-002", D2, ("WD-001", 20)),
            ],
            sale_orders=[
                so("SO-001", D1, ("WD-001", 10)),
                so("SO-002", D2, ("WD-001", 25)),
            ],
            ordering_policy="LIFO",
        )
        self.assertEqual(ledger.closing_balances()["WD-001"], 150 + 30 + 20 - 10 - 25)

    # ---------------------------------------------------------
    # Search / reconciliation
    # ---------------------------------------------------------

    def test_filter_movements_matches_code_name_or_reference(self):
        ledger = build_stock_ledger(
            items=[self.WOOD],
            purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
            sale_orders=[so("SO-001", D2, ("WD-001", 10))],
        )
        self.assertEqual(len(filter_movements(ledger.movements, "wood")), 2)
        self.assertEqual(len(filter_movements(ledger.movements, "wd-001")), 2)
        self.assertEqual([m.ref_id for m in filter_movements(ledger.movements, "so-")], ["SO-001"])
        self.assertEqual(len(filter_movements(ledger.movements, "")), 2)

    def test_reconcile_items(self):
        idle = LedgerItem(item_code="NL-001", name="Nails", stock_level=9)
        ledger = build_stock_ledger(
            items=[self.WOOD, idle],
            purchase_orders=[po("PO-001", D1, ("WD-001", 30))],
            sale_orders=[],
        )
        rows = {r.item_code: r for r in reconcile_items([self.WOOD, idle], ledger)}

        self.assertEqual(rows["WD-001"].ledger_balance, 180)
        self.assertEqual(rows["WD-001"].difference, 30)
        self.assertEqual(rows["WD-001"].movement_count, 1)
        self.assertEqual(rows["NL-001"].ledger_balance, 9)
        self.assertEqual(rows["NL-001"].difference, 0)
