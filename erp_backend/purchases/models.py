# purchases/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES)


class Supplier(models.Model):
    """
    Supplier master.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200, unique=True)
    contact_person = models.CharField(max_length=200, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class PurchaseOrder(models.Model):
    """
    Purchase order header.

    Lifecycle:
      DRAFT -> SENT -> FULFILLED (goods received, prices known) -> PAID

    Only FULFILLED/PAID orders move stock (see inventory.services.stock_ledger).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    STATUS_DRAFT = "DRAFT"
    STATUS_SENT = "SENT"
    STATUS_FULFILLED = "FULFILLED"
    STATUS_PAID = "PAID"

    STATUSES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SENT, "Sent"),
        (STATUS_FULFILLED, "Fulfilled"),
        (STATUS_PAID, "Paid"),
    ]

    order_number = models.CharField(max_length=32, unique=True)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchase_orders",
    )

    date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_DRAFT)

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    sent_at = models.DateTimeField(null=True, blank=True)
    received_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="purchase_order_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "date"], name="purchases_status_date_idx"),
        ]

    @property
    def supplier_name(self) -> str:
        return getattr(self.supplier, "name", "")

    @property
    def is_received(self) -> bool:
        return self.status in (self.STATUS_FULFILLED, self.STATUS_PAID)

    def clean(self):
        if not (self.order_number or "").strip():
            raise ValidationError({"order_number": "order_number is required"})

        if self.is_received and not self.received_at:
            raise ValidationError(
                {"received_at": "received_at is required once the order is received"}
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} ({self.supplier_name})"


class PurchaseOrderLine(models.Model):
    """
    Purchase order line.

    item_code references MasterItem.item_code by value. unit_price and
    total_value stay empty until the order is received.
    """

    order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    item_code = models.CharField(max_length=32, db_index=True)
    quantity = models.PositiveIntegerField()

    unit_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    total_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="purchase_order_line_quantity_gt_zero",
            ),
        ]

    def clean(self):
        if self.unit_price is not None and self.unit_price <= Decimal("0.00"):
            raise ValidationError({"unit_price": "unit_price must be > 0"})

    def price(self, unit_price) -> None:
        self.unit_price = _money(unit_price)
        self.total_value = _money(Decimal(self.quantity) * self.unit_price)

    def __str__(self):
        return f"{self.item_code} x {self.quantity}"
