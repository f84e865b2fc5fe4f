# payments/api/urls.py

from django.urls import path

from payments.api.views import (
    CreditListView,
    InstallmentCreateView,
    PaymentListView,
    PurchaseOrderPaymentView,
    ReferenceNumberCheckView,
    SaleOrderPaymentView,
    TransactionCreateView,
)

urlpatterns = [
    path("", PaymentListView.as_view(), name="payments-list"),
    path("transactions/", TransactionCreateView.as_view(), name="payments-transactions"),
    path("credits/", CreditListView.as_view(), name="payments-credits"),
    path(
        "credits/<uuid:payment_id>/installments/",
        InstallmentCreateView.as_view(),
        name="payments-credit-installments",
    ),
    path(
        "purchase-orders/<uuid:order_id>/",
        PurchaseOrderPaymentView.as_view(),
        name="payments-purchase-order",
    ),
    path(
        "sale-orders/<uuid:order_id>/",
        SaleOrderPaymentView.as_view(),
        name="payments-sale-order",
    ),
    path(
        "reference-numbers/validate/",
        ReferenceNumberCheckView.as_view(),
        name="payments-reference-validate",
    ),
]
