# company/api/urls.py

from django.urls import path

from company.api.views import (
    CompanyProfileView,
    StaffMemberDetailView,
    StaffMemberListCreateView,
)

urlpatterns = [
    path("profile/", CompanyProfileView.as_view(), name="company-profile"),
    path("staff/", StaffMemberListCreateView.as_view(), name="company-staff"),
    path("staff/<int:staff_id>/", StaffMemberDetailView.as_view(), name="company-staff-detail"),
]
