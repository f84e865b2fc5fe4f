# inventory/api/urls.py

from django.urls import path

from inventory.api.views import (
    MasterItemDetailView,
    MasterItemListCreateView,
    NextItemCodeView,
    StockLedgerView,
    StockLevelView,
    StockReconciliationView,
)

urlpatterns = [
    path("items/", MasterItemListCreateView.as_view(), name="inventory-items"),
    path("items/next-code/", NextItemCodeView.as_view(), name="inventory-next-code"),
    path(
        "items/<str:item_code>/",
        MasterItemDetailView.as_view(),
        name="inventory-item-detail",
    ),
    path("stock-levels/", StockLevelView.as_view(), name="inventory-stock-levels"),
    path("ledger/", StockLedgerView.as_view(), name="inventory-ledger"),
    path(
        "ledger/reconciliation/",
        StockReconciliationView.as_view(),
        name="inventory-ledger-reconciliation",
    ),
]
