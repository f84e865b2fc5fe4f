import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("purchases", "0001_initial"),
        ("sales", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "method",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("card", "Card"),
                            ("online", "Online"),
                            ("qr", "QR"),
                            ("cheque", "Cheque"),
                            ("credit", "Credit"),
                        ],
                        max_length=16,
                    ),
                ),
                ("details", models.CharField(blank=True, default="", max_length=255)),
                (
                    "payment_type",
                    models.CharField(
                        choices=[("income", "Income"), ("expense", "Expense")],
                        max_length=16,
                    ),
                ),
                ("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("reference_number", models.CharField(blank=True, db_index=True, default="", max_length=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "purchase_order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="purchases.purchaseorder",
                    ),
                ),
                (
                    "sale_order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="sales.saleorder",
                    ),
                ),
                (
                    "settles",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="installments",
                        to="payments.payment",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [models.Index(fields=["method", "payment_type"], name="payments_method_type_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=Decimal("0.00")),
                        name="payment_amount_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(paid_amount__gte=Decimal("0.00")),
                        name="payment_paid_amount_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("purchase_order__isnull", False),
                            ("sale_order__isnull", False),
                            _negated=True,
                        ),
                        name="payment_single_order_link",
                    ),
                ],
            },
        ),
    ]
