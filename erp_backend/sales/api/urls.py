# sales/api/urls.py

from django.urls import path

from sales.api.views import (
    CustomerListCreateView,
    QuotationConvertView,
    QuotationDetailView,
    QuotationListCreateView,
    QuotationStatusView,
    SaleOrderDetailView,
    SaleOrderListView,
    SaleOrderShipView,
)

urlpatterns = [
    path("customers/", CustomerListCreateView.as_view(), name="sales-customers"),
    path("quotations/", QuotationListCreateView.as_view(), name="sales-quotations"),
    path(
        "quotations/<uuid:quotation_id>/",
        QuotationDetailView.as_view(),
        name="sales-quotation-detail",
    ),
    path(
        "quotations/<uuid:quotation_id>/status/",
        QuotationStatusView.as_view(),
        name="sales-quotation-status",
    ),
    path(
        "quotations/<uuid:quotation_id>/convert/",
        QuotationConvertView.as_view(),
        name="sales-quotation-convert",
    ),
    path("orders/", SaleOrderListView.as_view(), name="sales-orders"),
    path("orders/<uuid:order_id>/", SaleOrderDetailView.as_view(), name="sales-order-detail"),
    path(
        "orders/<uuid:order_id>/ship/",
        SaleOrderShipView.as_view(),
        name="sales-order-ship",
    ),
]
