# sales/admin.py

from django.contrib import admin

from sales.models import Customer, Quotation, QuotationLine, SaleOrder, SaleOrderLine


class QuotationLineInline(admin.TabularInline):
    model = QuotationLine
    extra = 0


class SaleOrderLineInline(admin.TabularInline):
    model = SaleOrderLine
    extra = 0


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "contact_person", "phone", "email")
    search_fields = ("name",)


@admin.register(Quotation)
class QuotationAdmin(admin.ModelAdmin):
    list_display = ("quotation_number", "customer", "date", "status", "amount")
    list_filter = ("status",)
    search_fields = ("quotation_number", "customer__name")
    inlines = [QuotationLineInline]


@admin.register(SaleOrder)
class SaleOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer", "date", "status", "amount")
    list_filter = ("status",)
    search_fields = ("order_number", "customer__name")
    inlines = [SaleOrderLineInline]
