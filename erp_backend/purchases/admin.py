# purchases/admin.py

from django.contrib import admin

from purchases.models import PurchaseOrder, PurchaseOrderLine, Supplier


class PurchaseOrderLineInline(admin.TabularInline):
    model = PurchaseOrderLine
    extra = 0


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "contact_person", "phone", "email")
    search_fields = ("name",)


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "supplier", "date", "status", "total_amount")
    list_filter = ("status",)
    search_fields = ("order_number", "supplier__name")
    inlines = [PurchaseOrderLineInline]
