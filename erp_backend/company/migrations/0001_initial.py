from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CompanyProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("company_name", models.CharField(blank=True, default="", max_length=200)),
                ("address", models.TextField(blank=True, default="")),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("currency_code", models.CharField(default="USD", max_length=3)),
                (
                    "stock_order_method",
                    models.CharField(
                        blank=True,
                        choices=[("FIFO", "First In, First Out"), ("LIFO", "Last In, First Out")],
                        default="FIFO",
                        max_length=4,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "company profile",
            },
        ),
    ]
