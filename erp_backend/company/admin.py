# company/admin.py

from django.contrib import admin

from company.models import CompanyProfile, StaffMember


@admin.register(CompanyProfile)
class CompanyProfileAdmin(admin.ModelAdmin):
    list_display = ("company_name", "currency_code", "stock_order_method", "updated_at")

    def has_add_permission(self, request):
        return not CompanyProfile.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("name", "position", "contact_number", "email")
    search_fields = ("name", "email", "contact_number")
