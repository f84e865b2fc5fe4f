# inventory/tests/test_stock_levels.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from inventory.models import LinkedItem, MasterItem
from inventory.services.item_codes import next_item_code
from inventory.services.stock_levels import filter_stock_items, summarize_stock


class MasterItemModelTests(TestCase):
    """
    GUARANTEES:
    - Stored stock levels are never negative
    - maximum_level >= minimum_level when both are set
    """

    def _item(self, **overrides):
        data = {
            "item_code": "RM-001",
            "name": "Oak board",
            "item_type": MasterItem.ItemType.RAW_MATERIAL,
            "unit_price": Decimal("12.00"),
            "stock_level": 5,
        }
        data.update(overrides)
        return MasterItem.objects.create(**data)

    def test_negative_stock_rejected(self):
        with self.assertRaises(ValidationError):
            self._item(stock_level=-1)

    def test_non_positive_price_rejected(self):
        with self.assertRaises(ValidationError):
            self._item(unit_price=Decimal("0.00"))

    def test_level_bounds(self):
        with self.assertRaises(ValidationError):
            self._item(minimum_level=10, maximum_level=5)

    def test_below_minimum_flag(self):
        item = self._item(minimum_level=10)
        self.assertTrue(item.is_below_minimum)
        self.assertEqual(item.stock_value, Decimal("60.00"))

    def test_linked_items(self):
        board = self._item()
        table = self._item(
            item_code="FI-001",
            name="Table",
            item_type=MasterItem.ItemType.FINISHED_GOOD,
            unit_price=Decimal("300.00"),
        )
        LinkedItem.objects.create(parent=table, component=board, quantity=6)

        self.assertEqual(list(table.linked_items.all()), [board])
        self.assertEqual(list(board.used_in.all()), [table])


class ItemCodeTests(TestCase):
    def test_codes_per_type(self):
        self.assertEqual(next_item_code(MasterItem.ItemType.RAW_MATERIAL), "RM-001")
        self.assertEqual(next_item_code(MasterItem.ItemType.FINISHED_GOOD), "FI-001")

        for code in ("RM-001", "RM-007"):
            MasterItem.objects.create(
                item_code=code,
                name=f"Item {code}",
                item_type=MasterItem.ItemType.RAW_MATERIAL,
                unit_price=Decimal("1.00"),
            )

        self.assertEqual(next_item_code(MasterItem.ItemType.RAW_MATERIAL), "RM-008")
        self.assertEqual(next_item_code(MasterItem.ItemType.FINISHED_GOOD), "FI-001")

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            next_item_code("SERVICE")


class StockLevelSummaryTests(TestCase):
    def setUp(self):
        MasterItem.objects.create(
            item_code="RM-001",
            name="Pine plank",
            item_type=MasterItem.ItemType.RAW_MATERIAL,
            unit_price=Decimal("2.50"),
            stock_level=100,
        )
        MasterItem.objects.create(
            item_code="FI-001",
            name="Pine shelf",
            item_type=MasterItem.ItemType.FINISHED_GOOD,
            unit_price=Decimal("45.00"),
            stock_level=3,
        )

    def test_totals_over_all_items(self):
        summary = summarize_stock(MasterItem.objects.all())
        self.assertEqual(summary.item_count, 2)
        self.assertEqual(summary.total_count, 103)
        self.assertEqual(summary.total_value, Decimal("385.00"))

    def test_filter_by_type_and_search(self):
        items = MasterItem.objects.all()

        raw = filter_stock_items(items, item_type=MasterItem.ItemType.RAW_MATERIAL)
        self.assertEqual([i.item_code for i in raw], ["RM-001"])

        shelves = filter_stock_items(items, search="SHELF")
        self.assertEqual([i.item_code for i in shelves], ["FI-001"])

        by_code = filter_stock_items(items, item_type="all", search="rm-")
        self.assertEqual([i.item_code for i in by_code], ["RM-001"])

    def test_empty_summary(self):
        summary = summarize_stock([])
        self.assertEqual((summary.item_count, summary.total_count), (0, 0))
        self.assertEqual(summary.total_value, Decimal("0.00"))
