# payments/admin.py

from django.contrib import admin

from payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "reference_number",
        "date",
        "payment_type",
        "method",
        "amount",
        "paid_amount",
        "description",
    )
    list_filter = ("payment_type", "method")
    search_fields = ("reference_number", "description", "details")
    raw_id_fields = ("purchase_order", "sale_order", "settles")
