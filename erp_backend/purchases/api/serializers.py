# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import PurchaseOrder, PurchaseOrderLine, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class PurchaseOrderLineCreateSerializer(serializers.Serializer):
    item_code = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)


class PurchaseOrderCreateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    date = serializers.DateField(required=False)
    lines = PurchaseOrderLineCreateSerializer(many=True, allow_empty=False)


class PurchaseOrderLinesUpdateSerializer(serializers.Serializer):
    lines = PurchaseOrderLineCreateSerializer(many=True, allow_empty=False)


class PurchaseOrderLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseOrderLine
        fields = ["id", "item_code", "quantity", "unit_price", "total_value"]


class PurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    lines = PurchaseOrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "order_number",
            "supplier",
            "supplier_name",
            "date",
            "status",
            "total_amount",
            "sent_at",
            "received_at",
            "created_at",
            "lines",
        ]


class ReceiveLinePriceSerializer(serializers.Serializer):
    line_id = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2)

    def validate_unit_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Unit price must be a positive number.")
        return value


class ReceivePurchaseOrderSerializer(serializers.Serializer):
    prices = ReceiveLinePriceSerializer(many=True, allow_empty=False)
