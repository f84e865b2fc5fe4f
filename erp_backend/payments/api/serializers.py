# payments/api/serializers.py

from rest_framework import serializers

from payments.models import Payment
from payments.services.credit_listing import PERIODS
from payments.services.method_details import REQUIRED_FIELDS, missing_method_fields

DIRECT_METHODS = [m for m in Payment.Method.values if m != Payment.Method.CREDIT]


class PaymentSerializer(serializers.ModelSerializer):
    order_reference = serializers.CharField(read_only=True)
    counterparty_name = serializers.CharField(read_only=True)
    remaining = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "purchase_order",
            "sale_order",
            "settles",
            "order_reference",
            "counterparty_name",
            "description",
            "date",
            "amount",
            "method",
            "details",
            "payment_type",
            "paid_amount",
            "remaining",
            "reference_number",
            "created_at",
        ]
        read_only_fields = tuple(
            f for f in fields if f not in ("order_reference", "counterparty_name", "remaining")
        )

    def get_remaining(self, obj):
        if not obj.is_credit:
            return None
        return str(obj.amount - (obj.paid_amount or 0))


class MethodDetailsSerializer(serializers.Serializer):
    """Method-specific form fields. Required ones depend on `method`."""

    card_last4 = serializers.CharField(required=False, allow_blank=True)
    from_bank = serializers.CharField(required=False, allow_blank=True)
    from_account = serializers.CharField(required=False, allow_blank=True)
    to_bank = serializers.CharField(required=False, allow_blank=True)
    to_account = serializers.CharField(required=False, allow_blank=True)
    cheque_bank = serializers.CharField(required=False, allow_blank=True)
    cheque_number = serializers.CharField(required=False, allow_blank=True)
    cheque_date = serializers.DateField(required=False, allow_null=True)

    DETAIL_FIELDS = (
        "card_last4",
        "from_bank",
        "from_account",
        "to_bank",
        "to_account",
        "cheque_bank",
        "cheque_number",
        "cheque_date",
    )

    def validate(self, attrs):
        method = attrs.get("method")
        if method in REQUIRED_FIELDS:
            missing = missing_method_fields(method, attrs)
            if missing:
                raise serializers.ValidationError(
                    {
                        "method": "Please fill in all required details for the selected payment method.",
                        "missing_fields": missing,
                    }
                )
        return attrs

    def method_details(self) -> dict:
        data = self.validated_data
        return {f: data[f] for f in self.DETAIL_FIELDS if data.get(f) not in (None, "")}


class AmountField(serializers.DecimalField):
    def __init__(self, **kwargs):
        super().__init__(max_digits=14, decimal_places=2, **kwargs)


class InstallmentSerializer(MethodDetailsSerializer):
    amount = AmountField()
    method = serializers.ChoiceField(choices=DIRECT_METHODS)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be a positive number.")
        return value


class OrderPaymentSerializer(MethodDetailsSerializer):
    amount = AmountField()
    method = serializers.ChoiceField(choices=Payment.Method.values)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be a positive number.")
        return value


class TransactionSerializer(MethodDetailsSerializer):
    payment_type = serializers.ChoiceField(choices=Payment.PaymentType.values)
    description = serializers.CharField()
    amount = AmountField()
    method = serializers.ChoiceField(choices=Payment.Method.values)
    date = serializers.DateField(required=False)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be a positive number.")
        return value


class CreditQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(
        choices=Payment.PaymentType.values, required=False, allow_blank=True
    )
    search = serializers.CharField(required=False, allow_blank=True, default="")
    counterparty = serializers.CharField(required=False, allow_blank=True, default="")
    period = serializers.ChoiceField(choices=PERIODS, required=False, default="all")
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)


class CreditRowSerializer(serializers.Serializer):
    payment = PaymentSerializer()
    counterparty = serializers.CharField()
    reference = serializers.CharField()
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)
    is_settled = serializers.BooleanField()


class ReferenceNumberQuerySerializer(serializers.Serializer):
    value = serializers.CharField(allow_blank=True, trim_whitespace=False)
