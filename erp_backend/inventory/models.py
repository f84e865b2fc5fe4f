# inventory/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class MasterItem(models.Model):
    """
    Stock master record (raw material or finished good).

    STOCK MODEL (IMPORTANT):
    - stock_level is the CURRENT on-hand quantity.
    - Receiving a purchase order increases it; converting a quotation into a
      sale order decreases it.
    - The stock ledger is a derived, read-only view and never writes here.
    """

    class ItemType(models.TextChoices):
        RAW_MATERIAL = "RAW_MATERIAL", "Raw Material"
        FINISHED_GOOD = "FINISHED_GOOD", "Finished Good"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item_code = models.CharField(max_length=32, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)
    item_type = models.CharField(max_length=16, choices=ItemType.choices)

    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    stock_level = models.IntegerField(default=0)

    minimum_level = models.PositiveIntegerField(null=True, blank=True)
    maximum_level = models.PositiveIntegerField(null=True, blank=True)

    linked_items = models.ManyToManyField(
        "self",
        through="LinkedItem",
        through_fields=("parent", "component"),
        symmetrical=False,
        related_name="used_in",
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["item_code"]
        indexes = [
            models.Index(fields=["item_type", "item_code"], name="inventory_item_type_code_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.item_code})"

    def clean(self):
        if not (self.item_code or "").strip():
            raise ValidationError({"item_code": "item_code is required"})

        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        if self.unit_price is None or Decimal(self.unit_price) <= Decimal("0.00"):
            raise ValidationError({"unit_price": "unit_price must be greater than zero"})

        if self.stock_level is None or int(self.stock_level) < 0:
            raise ValidationError({"stock_level": "stock_level cannot be negative"})

        if (
            self.minimum_level is not None
            and self.maximum_level is not None
            and self.maximum_level < self.minimum_level
        ):
            raise ValidationError(
                {"maximum_level": "maximum_level must be >= minimum_level"}
            )

    def save(self, *args, **kwargs):
        if self.item_code is not None:
            self.item_code = self.item_code.strip()
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def stock_value(self) -> Decimal:
        return Decimal(int(self.stock_level or 0)) * Decimal(str(self.unit_price or "0.00"))

    @property
    def is_below_minimum(self) -> bool:
        return self.minimum_level is not None and self.stock_level < self.minimum_level


class LinkedItem(models.Model):
    """
    Bill-of-materials edge: `parent` uses `quantity` units of `component`.
    """

    parent = models.ForeignKey(
        MasterItem,
        on_delete=models.CASCADE,
        related_name="bom_lines",
    )
    component = models.ForeignKey(
        MasterItem,
        on_delete=models.PROTECT,
        related_name="bom_usages",
    )
    quantity = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["parent", "component"],
                name="uniq_linked_item_parent_component",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="linked_item_quantity_gt_zero",
            ),
        ]

    def clean(self):
        if self.parent_id and self.parent_id == self.component_id:
            raise ValidationError("An item cannot be linked to itself")

    def __str__(self):
        return f"{self.parent_id} uses {self.quantity} x {self.component_id}"
