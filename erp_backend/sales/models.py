# sales/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")


class Customer(models.Model):
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


class Quotation(models.Model):
    """
    Customer quotation.

    Lifecycle:
      DRAFT -> SENT -> APPROVED -> CONVERTED (becomes a SaleOrder)
                    -> REJECTED
    """

    STATUS_DRAFT = "DRAFT"
    STATUS_SENT = "SENT"
    STATUS_APPROVED = "APPROVED"
    STATUS_REJECTED = "REJECTED"
    STATUS_CONVERTED = "CONVERTED"

    STATUSES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SENT, "Sent"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_CONVERTED, "Converted"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    quotation_number = models.CharField(max_length=32, unique=True)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="quotations",
    )

    date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_DRAFT)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.00")),
                name="quotation_amount_nonnegative",
            ),
        ]

    @property
    def customer_name(self) -> str:
        return getattr(self.customer, "name", "")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.quotation_number} ({self.customer_name})"


class SaleOrder(models.Model):
    """
    Sale order. Every sale order moves stock out, whatever its status.

    Lifecycle:
      PROCESSING -> SHIPPED -> PAID  (PROCESSING -> PAID is allowed too)
    """

    STATUS_PROCESSING = "PROCESSING"
    STATUS_SHIPPED = "SHIPPED"
    STATUS_PAID = "PAID"

    STATUSES = [
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_PAID, "Paid"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(max_length=32, unique=True)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="sale_orders",
    )
    quotation = models.OneToOneField(
        Quotation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_order",
    )

    date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_PROCESSING)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.00")),
                name="sale_order_amount_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "date"], name="sales_status_date_idx"),
        ]

    @property
    def customer_name(self) -> str:
        return getattr(self.customer, "name", "")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} ({self.customer_name})"


class _PricedLine(models.Model):
    """
    item_code references MasterItem.item_code by value, not by FK.
    total_value is always quantity * unit_price.
    """

    item_code = models.CharField(max_length=32, db_index=True)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    total_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        abstract = True
        ordering = ["id"]

    def clean(self):
        if not self.quantity or self.quantity <= 0:
            raise ValidationError({"quantity": "quantity must be > 0"})
        if self.unit_price is None or self.unit_price <= Decimal("0.00"):
            raise ValidationError({"unit_price": "unit_price must be > 0"})

    def save(self, *args, **kwargs):
        self.total_value = (Decimal(self.quantity) * Decimal(self.unit_price)).quantize(TWOPLACES)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.item_code} x {self.quantity}"


class QuotationLine(_PricedLine):
    quotation = models.ForeignKey(
        Quotation,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    class Meta(_PricedLine.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="quotation_line_quantity_gt_zero",
            ),
        ]


class SaleOrderLine(_PricedLine):
    order = models.ForeignKey(
        SaleOrder,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    class Meta(_PricedLine.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="sale_order_line_quantity_gt_zero",
            ),
        ]
