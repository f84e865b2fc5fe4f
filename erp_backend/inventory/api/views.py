# inventory/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.api.serializers import (
    ItemReconciliationSerializer,
    MasterItemSerializer,
    StockLedgerQuerySerializer,
    StockLevelQuerySerializer,
    StockMovementSerializer,
)
from inventory.models import MasterItem
from inventory.services.item_codes import next_item_code
from inventory.services.stock_ledger import (
    USE_COMPANY_POLICY,
    filter_movements,
    load_ledger_items,
    load_stock_ledger,
    reconcile_items,
)
from inventory.services.stock_levels import filter_stock_items, summarize_stock


class MasterItemListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MasterItemSerializer

    @extend_schema(tags=["inventory"], responses=MasterItemSerializer(many=True))
    def get(self, request):
        qs = MasterItem.objects.prefetch_related("bom_lines__component").order_by("item_code")
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["inventory"],
        request=MasterItemSerializer,
        responses={201: MasterItemSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        item = s.save()
        return Response(self.get_serializer(item).data, status=status.HTTP_201_CREATED)


class MasterItemDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MasterItemSerializer
    queryset = MasterItem.objects.all()
    lookup_field = "item_code"

    @extend_schema(tags=["inventory"], responses=MasterItemSerializer)
    def get(self, request, item_code):
        return Response(self.get_serializer(self.get_object()).data)

    @extend_schema(tags=["inventory"], request=MasterItemSerializer, responses=MasterItemSerializer)
    def patch(self, request, item_code):
        s = self.get_serializer(self.get_object(), data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        item = s.save()
        return Response(self.get_serializer(item).data)


class NextItemCodeView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["inventory"])
    def get(self, request):
        item_type = (request.query_params.get("type") or "").strip()
        try:
            code = next_item_code(item_type)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"item_code": code})


class StockLevelView(GenericAPIView):
    """
    Stock level summary filtered by item type and search text.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["inventory"], parameters=[StockLevelQuerySerializer])
    def get(self, request):
        q = StockLevelQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        items = filter_stock_items(
            MasterItem.objects.order_by("item_code"),
            item_type=q.validated_data["type"],
            search=q.validated_data["search"],
        )
        summary = summarize_stock(items)

        return Response(
            {
                "total_count": summary.total_count,
                "total_value": str(summary.total_value),
                "item_count": summary.item_count,
                "items": [
                    {
                        "item_code": item.item_code,
                        "name": item.name,
                        "item_type": item.item_type,
                        "unit_price": str(item.unit_price),
                        "stock_level": item.stock_level,
                        "minimum_level": item.minimum_level,
                        "maximum_level": item.maximum_level,
                        "below_minimum": item.is_below_minimum,
                    }
                    for item in items
                ],
            }
        )


def _policy_from_query(data):
    if "policy" not in data:
        return USE_COMPANY_POLICY
    return None if data["policy"] == "NONE" else data["policy"]


class StockLedgerView(GenericAPIView):
    """
    Chronological stock movements with running balances (display order).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["inventory"],
        parameters=[StockLedgerQuerySerializer],
        responses=StockMovementSerializer(many=True),
    )
    def get(self, request):
        q = StockLedgerQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        data = q.validated_data

        ledger = load_stock_ledger(ordering_policy=_policy_from_query(data))

        movements = ledger.movements
        if data["item_code"]:
            movements = ledger.for_item(data["item_code"])
        movements = filter_movements(movements, data["search"])

        return Response(
            {
                "policy": ledger.policy,
                "movements": StockMovementSerializer(movements, many=True).data,
            }
        )


class StockReconciliationView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["inventory"],
        parameters=[StockLedgerQuerySerializer],
        responses=ItemReconciliationSerializer(many=True),
    )
    def get(self, request):
        q = StockLedgerQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        ledger = load_stock_ledger(ordering_policy=_policy_from_query(q.validated_data))
        rows = reconcile_items(load_ledger_items(), ledger)

        return Response(ItemReconciliationSerializer(rows, many=True).data)
