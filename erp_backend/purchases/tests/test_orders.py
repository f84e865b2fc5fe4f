# purchases/tests/test_orders.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import MasterItem
from purchases.models import PurchaseOrder, Supplier
from purchases.services.order_service import (
    PurchaseOrderError,
    create_purchase_order,
    delete_purchase_order,
    mark_purchase_order_sent,
    next_purchase_order_number,
    receive_purchase_order,
    replace_purchase_order_lines,
)

User = get_user_model()


class PurchaseOrderLifecycleTests(TestCase):
    """
    GUARANTEES:
    - DRAFT -> SENT -> FULFILLED, no shortcuts
    - Receiving prices every line and restocks known items
    - Unknown item codes never block receiving
    """

    def setUp(self):
        self.supplier = Supplier.objects.create(name="Timber Yard")
        self.wood = MasterItem.objects.create(
            item_code="RM-001",
            name="Wood",
            item_type=MasterItem.ItemType.RAW_MATERIAL,
            unit_price=Decimal("10.00"),
            stock_level=100,
        )

    def _draft(self, lines=None):
        return create_purchase_order(
            supplier_id=self.supplier.id,
            lines=lines or [{"item_code": "RM-001", "quantity": 50}],
        )

    # ---------------------------------------------------------
    # Numbering
    # ---------------------------------------------------------

    def test_order_numbers_are_sequential(self):
        self.assertEqual(next_purchase_order_number(), "PO-001")
        first = self._draft()
        second = self._draft()

        self.assertEqual(first.order_number, "PO-001")
        self.assertEqual(second.order_number, "PO-002")
        self.assertEqual(first.status, PurchaseOrder.STATUS_DRAFT)

    def test_create_requires_lines(self):
        with self.assertRaises(PurchaseOrderError):
            create_purchase_order(supplier_id=self.supplier.id, lines=[])

    def test_create_rejects_non_positive_quantity(self):
        with self.assertRaises(PurchaseOrderError):
            self._draft(lines=[{"item_code": "RM-001", "quantity": 0}])

    # ---------------------------------------------------------
    # Transitions
    # ---------------------------------------------------------

    def test_receive_requires_sent(self):
        order = self._draft()
        line = order.lines.get()

        with self.assertRaises(PurchaseOrderError):
            receive_purchase_order(
                order_id=order.id,
                prices=[{"line_id": line.id, "unit_price": "10.00"}],
            )

    def test_receive_prices_lines_and_restocks(self):
        order = self._draft()
        mark_purchase_order_sent(order_id=order.id)
        line = order.lines.get()

        result = receive_purchase_order(
            order_id=order.id,
            prices=[{"line_id": line.id, "unit_price": "12.50"}],
        )

        order.refresh_from_db()
        line.refresh_from_db()
        self.wood.refresh_from_db()

        self.assertEqual(order.status, PurchaseOrder.STATUS_FULFILLED)
        self.assertIsNotNone(order.received_at)
        self.assertEqual(order.total_amount, Decimal("625.00"))
        self.assertEqual(line.total_value, Decimal("625.00"))
        self.assertEqual(self.wood.stock_level, 150)
        self.assertEqual(result.restocked, {"RM-001": 50})
        self.assertEqual(result.unknown_item_codes, ())

    def test_receive_requires_every_line_priced(self):
        order = self._draft(
            lines=[
                {"item_code": "RM-001", "quantity": 5},
                {"item_code": "RM-001", "quantity": 6},
            ]
        )
        mark_purchase_order_sent(order_id=order.id)
        first = order.lines.first()

        with self.assertRaises(PurchaseOrderError):
            receive_purchase_order(
                order_id=order.id,
                prices=[{"line_id": first.id, "unit_price": "1.00"}],
            )

        self.wood.refresh_from_db()
        self.assertEqual(self.wood.stock_level, 100)

    def test_unknown_item_code_is_reported_not_fatal(self):
        order = self._draft(lines=[{"item_code": "GONE-1", "quantity": 3}])
        mark_purchase_order_sent(order_id=order.id)
        line = order.lines.get()

        result = receive_purchase_order(
            order_id=order.id,
            prices=[{"line_id": line.id, "unit_price": "2.00"}],
        )

        self.assertEqual(result.unknown_item_codes, ("GONE-1",))
        self.assertEqual(result.total_amount, Decimal("6.00"))

    def test_only_drafts_are_editable(self):
        order = self._draft()
        replace_purchase_order_lines(
            order_id=order.id, lines=[{"item_code": "RM-001", "quantity": 7}]
        )
        self.assertEqual(order.lines.get().quantity, 7)

        mark_purchase_order_sent(order_id=order.id)
        with self.assertRaises(PurchaseOrderError):
            replace_purchase_order_lines(
                order_id=order.id, lines=[{"item_code": "RM-001", "quantity": 8}]
            )
        with self.assertRaises(PurchaseOrderError):
            delete_purchase_order(order_id=order.id)

    def test_delete_draft(self):
        order = self._draft()
        delete_purchase_order(order_id=order.id)
        self.assertFalse(PurchaseOrder.objects.exists())


class PurchaseOrderApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="buyer", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.supplier = Supplier.objects.create(name="Hardware Hub")
        MasterItem.objects.create(
            item_code="RM-001",
            name="Screws",
            item_type=MasterItem.ItemType.RAW_MATERIAL,
            unit_price=Decimal("0.50"),
            stock_level=0,
        )

    def test_full_flow_over_http(self):
        res = self.client.post(
            "/api/purchases/orders/",
            {
                "supplier_id": str(self.supplier.id),
                "lines": [{"item_code": "RM-001", "quantity": 200}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        order_id = res.data["id"]
        line_id = res.data["lines"][0]["id"]

        res = self.client.post(f"/api/purchases/orders/{order_id}/send/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "SENT")

        res = self.client.post(
            f"/api/purchases/orders/{order_id}/receive/",
            {"prices": [{"line_id": line_id, "unit_price": "0.40"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["order"]["status"], "FULFILLED")
        self.assertEqual(res.data["restocked"], {"RM-001": 200})
        self.assertEqual(MasterItem.objects.get(item_code="RM-001").stock_level, 200)

    def test_send_twice_is_rejected(self):
        order = create_purchase_order(
            supplier_id=self.supplier.id,
            lines=[{"item_code": "RM-001", "quantity": 1}],
        )
        self.client.post(f"/api/purchases/orders/{order.id}/send/")
        res = self.client.post(f"/api/purchases/orders/{order.id}/send/")

        self.assertEqual(res.status_code, 400)
        self.assertIn("detail", res.data)

    def test_search_by_supplier(self):
        create_purchase_order(
            supplier_id=self.supplier.id,
            lines=[{"item_code": "RM-001", "quantity": 1}],
        )
        res = self.client.get("/api/purchases/orders/", {"search": "hardware"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)

        res = self.client.get("/api/purchases/orders/", {"search": "nobody"})
        self.assertEqual(len(res.data), 0)
