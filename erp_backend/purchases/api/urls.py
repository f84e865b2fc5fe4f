# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseOrderDetailView,
    PurchaseOrderListCreateView,
    PurchaseOrderReceiveView,
    PurchaseOrderSendView,
    SupplierListCreateView,
)

urlpatterns = [
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path("orders/", PurchaseOrderListCreateView.as_view(), name="purchase-orders"),
    path(
        "orders/<uuid:order_id>/",
        PurchaseOrderDetailView.as_view(),
        name="purchase-order-detail",
    ),
    path(
        "orders/<uuid:order_id>/send/",
        PurchaseOrderSendView.as_view(),
        name="purchase-order-send",
    ),
    path(
        "orders/<uuid:order_id>/receive/",
        PurchaseOrderReceiveView.as_view(),
        name="purchase-order-receive",
    ),
]
