# sales/api/serializers.py

from rest_framework import serializers

from sales.models import Customer, Quotation, QuotationLine, SaleOrder, SaleOrderLine


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class PricedLineInputSerializer(serializers.Serializer):
    item_code = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2)

    def validate_unit_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Unit price must be a positive number.")
        return value


class QuotationWriteSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField(required=False)
    date = serializers.DateField(required=False)
    lines = PricedLineInputSerializer(many=True, allow_empty=False)


class QuotationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            Quotation.STATUS_SENT,
            Quotation.STATUS_APPROVED,
            Quotation.STATUS_REJECTED,
        ]
    )


class QuotationLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationLine
        fields = ["id", "item_code", "quantity", "unit_price", "total_value"]


class SaleOrderLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleOrderLine
        fields = ["id", "item_code", "quantity", "unit_price", "total_value"]


class QuotationSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    lines = QuotationLineSerializer(many=True, read_only=True)

    class Meta:
        model = Quotation
        fields = [
            "id",
            "quotation_number",
            "customer",
            "customer_name",
            "date",
            "status",
            "amount",
            "created_at",
            "lines",
        ]


class SaleOrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    quotation_number = serializers.CharField(
        source="quotation.quotation_number", read_only=True, default=None
    )
    lines = SaleOrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = SaleOrder
        fields = [
            "id",
            "order_number",
            "customer",
            "customer_name",
            "quotation",
            "quotation_number",
            "date",
            "status",
            "amount",
            "created_at",
            "lines",
        ]
