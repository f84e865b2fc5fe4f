# inventory/api/serializers.py

from django.db import transaction
from rest_framework import serializers

from inventory.models import LinkedItem, MasterItem


class LinkedItemSerializer(serializers.Serializer):
    item_code = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)


class MasterItemSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(required=False, allow_blank=True)
    linked_items = serializers.SerializerMethodField()
    links = LinkedItemSerializer(many=True, write_only=True, required=False)
    stock_value = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = MasterItem
        fields = [
            "id",
            "item_code",
            "name",
            "item_type",
            "unit_price",
            "stock_level",
            "minimum_level",
            "maximum_level",
            "stock_value",
            "linked_items",
            "links",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "created_at", "updated_at")

    def get_linked_items(self, obj):
        return [
            {"item_code": line.component.item_code, "quantity": line.quantity}
            for line in obj.bom_lines.select_related("component").all()
        ]

    def validate_item_code(self, value):
        code = (value or "").strip()
        if code:
            qs = MasterItem.objects.filter(item_code=code)
            if self.instance is not None:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError("Item code already exists.")
        return code

    def validate_unit_price(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Unit price must be a positive number.")
        return value

    def validate_stock_level(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Stock level cannot be negative.")
        return value

    def validate(self, attrs):
        lo = attrs.get("minimum_level", getattr(self.instance, "minimum_level", None))
        hi = attrs.get("maximum_level", getattr(self.instance, "maximum_level", None))
        if lo is not None and hi is not None and hi < lo:
            raise serializers.ValidationError(
                {"maximum_level": "maximum_level must be >= minimum_level"}
            )
        return attrs

    def _replace_links(self, item, links):
        item.bom_lines.all().delete()
        for link in links:
            try:
                component = MasterItem.objects.get(item_code=link["item_code"])
            except MasterItem.DoesNotExist:
                raise serializers.ValidationError(
                    {"links": f"Unknown item code: {link['item_code']}"}
                )
            if component.pk == item.pk:
                raise serializers.ValidationError({"links": "An item cannot be linked to itself"})
            LinkedItem.objects.create(parent=item, component=component, quantity=link["quantity"])

    @transaction.atomic
    def create(self, validated_data):
        from inventory.services.item_codes import next_item_code

        links = validated_data.pop("links", [])
        if not (validated_data.get("item_code") or "").strip():
            validated_data["item_code"] = next_item_code(validated_data["item_type"])
        item = MasterItem.objects.create(**validated_data)
        self._replace_links(item, links)
        return item

    @transaction.atomic
    def update(self, instance, validated_data):
        links = validated_data.pop("links", None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        if links is not None:
            self._replace_links(instance, links)
        return instance


class StockMovementSerializer(serializers.Serializer):
    date = serializers.DateField()
    item_code = serializers.CharField()
    item_name = serializers.CharField()
    ref_id = serializers.CharField()
    kind = serializers.CharField()
    in_qty = serializers.IntegerField()
    out_qty = serializers.IntegerField()
    balance = serializers.IntegerField()


class ItemReconciliationSerializer(serializers.Serializer):
    item_code = serializers.CharField()
    item_name = serializers.CharField()
    stock_level = serializers.IntegerField()
    ledger_balance = serializers.IntegerField()
    movement_count = serializers.IntegerField()
    difference = serializers.IntegerField()


class StockLevelQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(
        choices=["all", *MasterItem.ItemType.values],
        required=False,
        default="all",
    )
    search = serializers.CharField(required=False, allow_blank=True, default="")


class StockLedgerQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default="")
    item_code = serializers.CharField(required=False, allow_blank=True, default="")
    policy = serializers.ChoiceField(
        choices=["FIFO", "LIFO", "NONE"],
        required=False,
        help_text="Override the company ordering policy for this request.",
    )
