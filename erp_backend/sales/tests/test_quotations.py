# sales/tests/test_quotations.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import MasterItem
from sales.models import Customer, Quotation, SaleOrder
from sales.services.order_service import mark_sale_order_shipped
from sales.services.quotation_service import (
    InsufficientStockError,
    SalesServiceError,
    change_quotation_status,
    convert_quotation,
    create_quotation,
    delete_quotation,
    update_quotation,
)

User = get_user_model()


class QuotationServiceTests(TestCase):
    """
    GUARANTEES:
    - Quotation amount = sum(quantity * unit_price)
    - Status moves only along DRAFT -> SENT -> APPROVED/REJECTED
    - Conversion is all-or-nothing
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="Hotel Lagoon")
        self.table = MasterItem.objects.create(
            item_code="FI-001",
            name="Dining Table",
            item_type=MasterItem.ItemType.FINISHED_GOOD,
            unit_price=Decimal("250.00"),
            stock_level=10,
        )
        self.chair = MasterItem.objects.create(
            item_code="FI-002",
            name="Chair",
            item_type=MasterItem.ItemType.FINISHED_GOOD,
            unit_price=Decimal("40.00"),
            stock_level=4,
        )

    def _quotation(self, lines=None):
        return create_quotation(
            customer_id=self.customer.id,
            lines=lines
            or [
                {"item_code": "FI-001", "quantity": 2, "unit_price": "250.00"},
                {"item_code": "FI-002", "quantity": 4, "unit_price": "40.00"},
            ],
        )

    def _approved(self, lines=None):
        q = self._quotation(lines)
        change_quotation_status(quotation_id=q.id, status="SENT")
        change_quotation_status(quotation_id=q.id, status="APPROVED")
        return q

    # ---------------------------------------------------------
    # Creation
    # ---------------------------------------------------------

    def test_create_numbers_and_totals(self):
        first = self._quotation()
        second = self._quotation()

        self.assertEqual(first.quotation_number, "QUO-001")
        self.assertEqual(second.quotation_number, "QUO-002")
        self.assertEqual(first.status, Quotation.STATUS_DRAFT)
        self.assertEqual(first.amount, Decimal("660.00"))
        self.assertEqual(
            list(first.lines.values_list("total_value", flat=True)),
            [Decimal("500.00"), Decimal("160.00")],
        )

    def test_create_rejects_zero_price(self):
        with self.assertRaises(SalesServiceError):
            self._quotation(lines=[{"item_code": "FI-001", "quantity": 1, "unit_price": "0"}])

    def test_update_resets_to_draft_and_recomputes(self):
        q = self._quotation()
        change_quotation_status(quotation_id=q.id, status="SENT")
        change_quotation_status(quotation_id=q.id, status="REJECTED")

        update_quotation(
            quotation_id=q.id,
            lines=[{"item_code": "FI-001", "quantity": 1, "unit_price": "240.00"}],
        )
        q.refresh_from_db()

        self.assertEqual(q.status, Quotation.STATUS_DRAFT)
        self.assertEqual(q.amount, Decimal("240.00"))
        self.assertEqual(q.lines.count(), 1)

    # ---------------------------------------------------------
    # Status
    # ---------------------------------------------------------

    def test_cannot_skip_sent(self):
        q = self._quotation()
        with self.assertRaises(SalesServiceError):
            change_quotation_status(quotation_id=q.id, status="APPROVED")

    def test_cannot_set_converted_directly(self):
        q = self._approved()
        with self.assertRaises(SalesServiceError):
            change_quotation_status(quotation_id=q.id, status="CONVERTED")

    def test_only_draft_or_rejected_can_be_deleted(self):
        q = self._quotation()
        change_quotation_status(quotation_id=q.id, status="SENT")
        with self.assertRaises(SalesServiceError):
            delete_quotation(quotation_id=q.id)

        change_quotation_status(quotation_id=q.id, status="REJECTED")
        delete_quotation(quotation_id=q.id)
        self.assertFalse(Quotation.objects.filter(id=q.id).exists())

    # ---------------------------------------------------------
    # Conversion
    # ---------------------------------------------------------

    def test_convert_allocates_stock_and_creates_order(self):
        q = self._approved()

        result = convert_quotation(quotation_id=q.id)

        q.refresh_from_db()
        self.table.refresh_from_db()
        self.chair.refresh_from_db()
        order = result.sale_order

        self.assertEqual(q.status, Quotation.STATUS_CONVERTED)
        self.assertEqual(order.order_number, "SO-001")
        self.assertEqual(order.status, SaleOrder.STATUS_PROCESSING)
        self.assertEqual(order.amount, Decimal("660.00"))
        self.assertEqual(order.quotation_id, q.id)
        self.assertEqual(order.lines.count(), 2)
        self.assertEqual(self.table.stock_level, 8)
        self.assertEqual(self.chair.stock_level, 0)
        self.assertEqual(result.allocated, {"FI-001": 2, "FI-002": 4})

    def test_convert_requires_approved(self):
        q = self._quotation()
        with self.assertRaises(SalesServiceError):
            convert_quotation(quotation_id=q.id)

    def test_convert_insufficient_stock_changes_nothing(self):
        q = self._approved(
            lines=[
                {"item_code": "FI-001", "quantity": 2, "unit_price": "250.00"},
                {"item_code": "FI-002", "quantity": 5, "unit_price": "40.00"},
            ]
        )

        with self.assertRaises(InsufficientStockError) as ctx:
            convert_quotation(quotation_id=q.id)

        self.assertEqual(ctx.exception.item_code, "FI-002")
        self.assertEqual(ctx.exception.available, 4)

        q.refresh_from_db()
        self.table.refresh_from_db()
        self.assertEqual(q.status, Quotation.STATUS_APPROVED)
        self.assertEqual(self.table.stock_level, 10)
        self.assertFalse(SaleOrder.objects.exists())

    def test_convert_unknown_item_fails(self):
        q = self._approved(lines=[{"item_code": "FI-404", "quantity": 1, "unit_price": "9.00"}])

        with self.assertRaises(InsufficientStockError) as ctx:
            convert_quotation(quotation_id=q.id)

        self.assertIsNone(ctx.exception.available)

    def test_ship_processing_order(self):
        order = convert_quotation(quotation_id=self._approved().id).sale_order

        mark_sale_order_shipped(order_id=order.id)
        order.refresh_from_db()
        self.assertEqual(order.status, SaleOrder.STATUS_SHIPPED)

        with self.assertRaises(SalesServiceError):
            mark_sale_order_shipped(order_id=order.id)


class QuotationApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="sales", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.customer = Customer.objects.create(name="Cafe Nook")
        MasterItem.objects.create(
            item_code="FI-001",
            name="Stool",
            item_type=MasterItem.ItemType.FINISHED_GOOD,
            unit_price=Decimal("30.00"),
            stock_level=1,
        )

    def test_quotation_to_order_over_http(self):
        res = self.client.post(
            "/api/sales/quotations/",
            {
                "customer_id": str(self.customer.id),
                "lines": [{"item_code": "FI-001", "quantity": 1, "unit_price": "30.00"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        qid = res.data["id"]
        self.assertEqual(res.data["amount"], "30.00")

        for new_status in ("SENT", "APPROVED"):
            res = self.client.post(
                f"/api/sales/quotations/{qid}/status/", {"status": new_status}, format="json"
            )
            self.assertEqual(res.status_code, 200)

        res = self.client.post(f"/api/sales/quotations/{qid}/convert/")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["order_number"], "SO-001")
        self.assertEqual(res.data["quotation_number"], "QUO-001")

        res = self.client.get("/api/sales/orders/", {"search": "nook"})
        self.assertEqual(len(res.data), 1)

    def test_convert_without_stock_reports_item(self):
        q = create_quotation(
            customer_id=self.customer.id,
            lines=[{"item_code": "FI-001", "quantity": 3, "unit_price": "30.00"}],
        )
        change_quotation_status(quotation_id=q.id, status="SENT")
        change_quotation_status(quotation_id=q.id, status="APPROVED")

        res = self.client.post(f"/api/sales/quotations/{q.id}/convert/")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["item_code"], "FI-001")
        self.assertEqual(res.data["required"], 3)
        self.assertEqual(res.data["available"], 1)
