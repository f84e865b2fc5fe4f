# purchases/api/views.py

from django.db.models import Q
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from purchases.api.serializers import (
    PurchaseOrderCreateSerializer,
    PurchaseOrderLinesUpdateSerializer,
    PurchaseOrderSerializer,
    ReceivePurchaseOrderSerializer,
    SupplierSerializer,
)
from purchases.models import PurchaseOrder, Supplier
from purchases.services.order_service import (
    PurchaseOrderError,
    create_purchase_order,
    delete_purchase_order,
    mark_purchase_order_sent,
    receive_purchase_order,
    replace_purchase_order_lines,
)


def _order_payload(order_id):
    order = (
        PurchaseOrder.objects.select_related("supplier")
        .prefetch_related("lines")
        .get(id=order_id)
    )
    return PurchaseOrderSerializer(order).data


class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["purchases"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.order_by("name")
        return Response(
            SupplierSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=SupplierSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        supplier = s.save()
        return Response(
            SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED
        )


class PurchaseOrderListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseOrderCreateSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseOrderSerializer(many=True))
    def get(self, request):
        qs = (
            PurchaseOrder.objects.select_related("supplier")
            .prefetch_related("lines")
            .order_by("-date", "-order_number")
        )
        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(order_number__icontains=search)
                | Q(supplier__name__icontains=search)
                | Q(status__icontains=search)
            )
        return Response(
            PurchaseOrderSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=PurchaseOrderCreateSerializer,
        responses={201: PurchaseOrderSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = create_purchase_order(
                supplier_id=data["supplier_id"],
                lines=data["lines"],
                order_date=data.get("date"),
            )
        except PurchaseOrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(_order_payload(order.id), status=status.HTTP_201_CREATED)


class PurchaseOrderDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseOrderLinesUpdateSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseOrderSerializer)
    def get(self, request, order_id):
        try:
            return Response(_order_payload(order_id))
        except PurchaseOrder.DoesNotExist:
            return Response({"detail": "Purchase order not found"}, status=status.HTTP_404_NOT_FOUND)

    @extend_schema(
        tags=["purchases"],
        request=PurchaseOrderLinesUpdateSerializer,
        responses=PurchaseOrderSerializer,
    )
    def put(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            replace_purchase_order_lines(order_id=order_id, lines=s.validated_data["lines"])
        except PurchaseOrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(_order_payload(order_id))

    @extend_schema(tags=["purchases"])
    def delete(self, request, order_id):
        try:
            delete_purchase_order(order_id=order_id)
        except PurchaseOrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PurchaseOrderSendView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"], request=None, responses=PurchaseOrderSerializer)
    def post(self, request, order_id):
        try:
            mark_purchase_order_sent(order_id=order_id)
        except PurchaseOrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(_order_payload(order_id))


class PurchaseOrderReceiveView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReceivePurchaseOrderSerializer

    @extend_schema(tags=["purchases"], request=ReceivePurchaseOrderSerializer)
    def post(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = receive_purchase_order(
                order_id=order_id,
                prices=s.validated_data["prices"],
            )
        except PurchaseOrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "order": _order_payload(order_id),
                "restocked": result.restocked,
                "unknown_item_codes": list(result.unknown_item_codes),
            },
            status=status.HTTP_200_OK,
        )
