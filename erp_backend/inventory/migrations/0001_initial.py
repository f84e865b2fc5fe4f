import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MasterItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("item_code", models.CharField(db_index=True, max_length=32, unique=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "item_type",
                    models.CharField(
                        choices=[("RAW_MATERIAL", "Raw Material"), ("FINISHED_GOOD", "Finished Good")],
                        max_length=16,
                    ),
                ),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=14)),
                ("stock_level", models.IntegerField(default=0)),
                ("minimum_level", models.PositiveIntegerField(blank=True, null=True)),
                ("maximum_level", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["item_code"],
            },
        ),
        migrations.CreateModel(
            name="LinkedItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                (
                    "component",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bom_usages",
                        to="inventory.masteritem",
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bom_lines",
                        to="inventory.masteritem",
                    ),
                ),
            ],
        ),
        migrations.AddField(
            model_name="masteritem",
            name="linked_items",
            field=models.ManyToManyField(
                blank=True,
                related_name="used_in",
                through="inventory.LinkedItem",
                through_fields=("parent", "component"),
                to="inventory.masteritem",
            ),
        ),
        migrations.AddIndex(
            model_name="masteritem",
            index=models.Index(fields=["item_type", "item_code"], name="inventory_item_type_code_idx"),
        ),
        migrations.AddConstraint(
            model_name="linkeditem",
            constraint=models.UniqueConstraint(
                fields=("parent", "component"), name="uniq_linked_item_parent_component"
            ),
        ),
        migrations.AddConstraint(
            model_name="linkeditem",
            constraint=models.CheckConstraint(
                condition=models.Q(quantity__gt=0), name="linked_item_quantity_gt_zero"
            ),
        ),
    ]
