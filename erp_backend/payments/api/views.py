# payments/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from payments.api.filters import PaymentFilter
from payments.api.serializers import (
    CreditQuerySerializer,
    CreditRowSerializer,
    InstallmentSerializer,
    OrderPaymentSerializer,
    PaymentSerializer,
    ReferenceNumberQuerySerializer,
    TransactionSerializer,
)
from payments.models import Payment
from payments.services.credit_listing import credit_payments, credit_rows
from payments.services.credit_settlement import record_installment
from payments.services.exceptions import (
    OverpaymentError,
    PaymentServiceError,
    PersistenceError,
)
from payments.services.order_payments import (
    order_paid_total,
    pay_purchase_order,
    pay_sale_order,
)
from payments.services.reference_numbers import reference_number_problem
from payments.services.transactions import record_transaction
from purchases.models import PurchaseOrder
from sales.models import SaleOrder


def _error_response(exc: PaymentServiceError) -> Response:
    if isinstance(exc, OverpaymentError):
        return Response(
            {"detail": str(exc), "remaining": str(exc.remaining)},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, PersistenceError):
        return Response(
            {
                "detail": str(exc),
                "settlement_id": str(exc.settlement_id) if exc.settlement_id else None,
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def _payments_qs():
    return Payment.objects.select_related(
        "purchase_order__supplier", "sale_order__customer"
    )


class PaymentListView(GenericAPIView):
    """
    All payments, newest first.
    ?type=income|expense  ?method=<method>  ?ad_hoc=true  ?date_from=  ?date_to=
    """

    permission_classes = [IsAuthenticated]
    serializer_class = PaymentSerializer
    filterset_class = PaymentFilter

    def get_queryset(self):
        return _payments_qs().order_by("-date", "-created_at")

    @extend_schema(tags=["payments"], responses=PaymentSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(PaymentSerializer(qs, many=True).data)


class TransactionCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = TransactionSerializer

    @extend_schema(tags=["payments"], request=TransactionSerializer, responses={201: PaymentSerializer})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            payment = record_transaction(
                payment_type=data["payment_type"],
                description=data["description"],
                amount=data["amount"],
                method=data["method"],
                method_details=s.method_details(),
                transaction_date=data.get("date"),
            )
        except PaymentServiceError as exc:
            return _error_response(exc)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class CreditListView(GenericAPIView):
    """
    Credit payments with paid / remaining.
    type=expense -> creditors, type=income -> debtors.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CreditRowSerializer

    @extend_schema(
        tags=["payments"],
        parameters=[CreditQuerySerializer],
        responses=CreditRowSerializer(many=True),
    )
    def get(self, request):
        q = CreditQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        params = q.validated_data

        qs = credit_payments(
            payment_type=params.get("type") or None,
            period=params["period"],
            date_from=params.get("date_from"),
            date_to=params.get("date_to"),
        )
        rows = credit_rows(qs, search=params["search"], counterparty=params["counterparty"])
        return Response(CreditRowSerializer(rows, many=True).data)


class InstallmentCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InstallmentSerializer

    @extend_schema(tags=["payments"], request=InstallmentSerializer)
    def post(self, request, payment_id):
        try:
            credit = _payments_qs().get(id=payment_id)
        except Payment.DoesNotExist:
            return Response({"detail": "Payment not found"}, status=status.HTTP_404_NOT_FOUND)

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = record_installment(
                credit_payment=credit,
                amount=data["amount"],
                method=data["method"],
                method_details=s.method_details(),
            )
        except PaymentServiceError as exc:
            return _error_response(exc)

        return Response(
            {
                "message": result.message,
                "fully_settled": result.fully_settled,
                "settlement_payment": PaymentSerializer(result.settlement_payment).data,
                "credit_payment": PaymentSerializer(result.credit_payment).data,
            },
            status=status.HTTP_201_CREATED,
        )


class _OrderPaymentView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderPaymentSerializer

    model = None
    link_field = ""
    pay = None

    def _total(self, order):
        raise NotImplementedError

    def get(self, request, order_id):
        try:
            order = self.model.objects.get(id=order_id)
        except self.model.DoesNotExist:
            return Response({"detail": "Order not found"}, status=status.HTTP_404_NOT_FOUND)

        paid = order_paid_total(order)
        total = self._total(order)
        payments = _payments_qs().filter(
            **{self.link_field: order}, settles__isnull=True
        ).order_by("date", "created_at")
        return Response(
            {
                "order_number": order.order_number,
                "status": order.status,
                "total": str(total),
                "paid": str(paid),
                "remaining": str(total - paid),
                "payments": PaymentSerializer(payments, many=True).data,
            }
        )

    def post(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = type(self).pay(
                order_id=order_id,
                amount=data["amount"],
                method=data["method"],
                method_details=s.method_details(),
            )
        except PaymentServiceError as exc:
            return _error_response(exc)

        return Response(
            {
                "message": result.message,
                "order_number": result.order_number,
                "fully_paid": result.fully_paid,
                "paid": str(result.paid_total),
                "remaining": str(result.remaining),
                "payment": PaymentSerializer(result.payment).data,
            },
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["payments"])
class PurchaseOrderPaymentView(_OrderPaymentView):
    model = PurchaseOrder
    link_field = "purchase_order"
    pay = staticmethod(pay_purchase_order)

    def _total(self, order):
        return order.total_amount


@extend_schema(tags=["payments"])
class SaleOrderPaymentView(_OrderPaymentView):
    model = SaleOrder
    link_field = "sale_order"
    pay = staticmethod(pay_sale_order)

    def _total(self, order):
        return order.amount


class ReferenceNumberCheckView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReferenceNumberQuerySerializer

    @extend_schema(tags=["payments"], parameters=[ReferenceNumberQuerySerializer])
    def get(self, request):
        q = ReferenceNumberQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        value = q.validated_data["value"]

        problem = reference_number_problem(value)
        return Response({"value": value, "valid": problem is None, "problem": problem})
