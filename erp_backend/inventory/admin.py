# inventory/admin.py

from django.contrib import admin

from inventory.models import LinkedItem, MasterItem


class LinkedItemInline(admin.TabularInline):
    model = LinkedItem
    fk_name = "parent"
    extra = 0


@admin.register(MasterItem)
class MasterItemAdmin(admin.ModelAdmin):
    list_display = ("item_code", "name", "item_type", "unit_price", "stock_level")
    list_filter = ("item_type",)
    search_fields = ("item_code", "name")
    inlines = [LinkedItemInline]
