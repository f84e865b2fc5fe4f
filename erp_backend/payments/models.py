# payments/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Payment(models.Model):
    """
    One money movement: order payment, ad-hoc income/expense, credit
    balance, or an installment settling a credit balance.

    CREDIT:
    - method == "credit" means an unsettled principal
    - paid_amount is the cumulative amount settled so far (0 <= paid_amount <= amount)
    - installments are separate Payment rows pointing back through `settles`

    reference_number is "YYYYMMDD" + 6-digit daily sequence, or blank.
    """

    class Method(models.TextChoices):
        CASH = "cash", "Cash"
        CARD = "card", "Card"
        ONLINE = "online", "Online"
        QR = "qr", "QR"
        CHEQUE = "cheque", "Cheque"
        CREDIT = "credit", "Credit"

    class PaymentType(models.TextChoices):
        INCOME = "income", "Income"
        EXPENSE = "expense", "Expense"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    purchase_order = models.ForeignKey(
        "purchases.PurchaseOrder",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )
    sale_order = models.ForeignKey(
        "sales.SaleOrder",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )
    settles = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="installments",
    )

    description = models.CharField(max_length=255, blank=True, default="")
    date = models.DateField(default=timezone.localdate)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=16, choices=Method.choices)
    details = models.CharField(max_length=255, blank=True, default="")
    payment_type = models.CharField(max_length=16, choices=PaymentType.choices)

    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    reference_number = models.CharField(max_length=14, blank=True, default="", db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="payment_amount_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=Decimal("0.00")),
                name="payment_paid_amount_nonnegative",
            ),
            models.CheckConstraint(
                condition=~(
                    models.Q(purchase_order__isnull=False) & models.Q(sale_order__isnull=False)
                ),
                name="payment_single_order_link",
            ),
        ]
        indexes = [
            models.Index(fields=["method", "payment_type"], name="payments_method_type_idx"),
        ]

    @property
    def is_credit(self) -> bool:
        return self.method == self.Method.CREDIT

    @property
    def is_ad_hoc(self) -> bool:
        return self.purchase_order_id is None and self.sale_order_id is None

    @property
    def order_reference(self) -> str:
        if self.purchase_order_id:
            return self.purchase_order.order_number
        if self.sale_order_id:
            return self.sale_order.order_number
        return ""

    @property
    def counterparty_name(self) -> str:
        if self.purchase_order_id:
            return self.purchase_order.supplier_name
        if self.sale_order_id:
            return self.sale_order.customer_name
        return self.description

    def clean(self):
        if self.amount is not None and self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "amount must be > 0"})

        if self.purchase_order_id and self.sale_order_id:
            raise ValidationError("A payment links to at most one order")

        if self.paid_amount and not self.is_credit:
            raise ValidationError({"paid_amount": "Only credit payments track paid_amount"})

        if self.amount is not None and (self.paid_amount or Decimal("0.00")) > self.amount:
            raise ValidationError({"paid_amount": "paid_amount cannot exceed amount"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.payment_type} {self.method} {self.amount} ({self.reference_number or '-'})"
