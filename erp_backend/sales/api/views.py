# sales/api/views.py

from django.db.models import Q
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from sales.api.serializers import (
    CustomerSerializer,
    QuotationSerializer,
    QuotationStatusSerializer,
    QuotationWriteSerializer,
    SaleOrderSerializer,
)
from sales.models import Customer, Quotation, SaleOrder
from sales.services.order_service import mark_sale_order_shipped
from sales.services.quotation_service import (
    InsufficientStockError,
    SalesServiceError,
    change_quotation_status,
    convert_quotation,
    create_quotation,
    delete_quotation,
    update_quotation,
)


def _quotation_payload(quotation_id):
    q = Quotation.objects.select_related("customer").prefetch_related("lines").get(id=quotation_id)
    return QuotationSerializer(q).data


def _order_payload(order_id):
    o = (
        SaleOrder.objects.select_related("customer", "quotation")
        .prefetch_related("lines")
        .get(id=order_id)
    )
    return SaleOrderSerializer(o).data


class CustomerListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CustomerSerializer

    @extend_schema(tags=["sales"], responses=CustomerSerializer(many=True))
    def get(self, request):
        qs = Customer.objects.order_by("name")
        return Response(CustomerSerializer(qs, many=True).data)

    @extend_schema(tags=["sales"], request=CustomerSerializer, responses={201: CustomerSerializer})
    def post(self, request):
        s = CustomerSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        customer = s.save()
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class QuotationListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = QuotationWriteSerializer

    @extend_schema(tags=["sales"], responses=QuotationSerializer(many=True))
    def get(self, request):
        qs = (
            Quotation.objects.select_related("customer")
            .prefetch_related("lines")
            .order_by("-date", "-quotation_number")
        )
        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(quotation_number__icontains=search)
                | Q(customer__name__icontains=search)
                | Q(status__icontains=search)
            )
        return Response(QuotationSerializer(qs, many=True).data)

    @extend_schema(tags=["sales"], request=QuotationWriteSerializer, responses={201: QuotationSerializer})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        if "customer_id" not in data:
            return Response(
                {"detail": "Please select a customer."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            quotation = create_quotation(
                customer_id=data["customer_id"],
                lines=data["lines"],
                quotation_date=data.get("date"),
            )
        except SalesServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(_quotation_payload(quotation.id), status=status.HTTP_201_CREATED)


class QuotationDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = QuotationWriteSerializer

    @extend_schema(tags=["sales"], responses=QuotationSerializer)
    def get(self, request, quotation_id):
        try:
            return Response(_quotation_payload(quotation_id))
        except Quotation.DoesNotExist:
            return Response({"detail": "Quotation not found"}, status=status.HTTP_404_NOT_FOUND)

    @extend_schema(tags=["sales"], request=QuotationWriteSerializer, responses=QuotationSerializer)
    def put(self, request, quotation_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            update_quotation(
                quotation_id=quotation_id,
                lines=data["lines"],
                customer_id=data.get("customer_id"),
            )
        except SalesServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(_quotation_payload(quotation_id))

    @extend_schema(tags=["sales"])
    def delete(self, request, quotation_id):
        try:
            delete_quotation(quotation_id=quotation_id)
        except SalesServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class QuotationStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = QuotationStatusSerializer

    @extend_schema(tags=["sales"], request=QuotationStatusSerializer, responses=QuotationSerializer)
    def post(self, request, quotation_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            change_quotation_status(
                quotation_id=quotation_id,
                status=s.validated_data["status"],
            )
        except SalesServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(_quotation_payload(quotation_id))


class QuotationConvertView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"], request=None, responses={201: SaleOrderSerializer})
    def post(self, request, quotation_id):
        try:
            result = convert_quotation(quotation_id=quotation_id)
        except InsufficientStockError as exc:
            return Response(
                {
                    "detail": str(exc),
                    "item_code": exc.item_code,
                    "required": exc.required,
                    "available": exc.available,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        except SalesServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(_order_payload(result.sale_order.id), status=status.HTTP_201_CREATED)


class SaleOrderListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SaleOrderSerializer

    @extend_schema(tags=["sales"], responses=SaleOrderSerializer(many=True))
    def get(self, request):
        qs = (
            SaleOrder.objects.select_related("customer", "quotation")
            .prefetch_related("lines")
            .order_by("-date", "-order_number")
        )
        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(order_number__icontains=search)
                | Q(customer__name__icontains=search)
                | Q(status__icontains=search)
            )
        return Response(SaleOrderSerializer(qs, many=True).data)


class SaleOrderDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SaleOrderSerializer

    @extend_schema(tags=["sales"], responses=SaleOrderSerializer)
    def get(self, request, order_id):
        try:
            return Response(_order_payload(order_id))
        except SaleOrder.DoesNotExist:
            return Response({"detail": "Sale order not found"}, status=status.HTTP_404_NOT_FOUND)


class SaleOrderShipView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"], request=None, responses=SaleOrderSerializer)
    def post(self, request, order_id):
        try:
            mark_sale_order_shipped(order_id=order_id)
        except SalesServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(_order_payload(order_id))
