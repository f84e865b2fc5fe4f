# company/api/serializers.py

from rest_framework import serializers

from company.models import CompanyProfile, StaffMember


class CompanyProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanyProfile
        fields = [
            "company_name",
            "address",
            "phone",
            "email",
            "currency_code",
            "stock_order_method",
            "updated_at",
        ]
        read_only_fields = ("updated_at",)

    def validate_currency_code(self, value):
        code = (value or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise serializers.ValidationError("currency_code must be a 3-letter ISO code")
        return code


def _sentence_case(value: str) -> str:
    value = (value or "").strip()
    return value[:1].upper() + value[1:].lower()


class StaffMemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = StaffMember
        fields = [
            "id",
            "name",
            "position",
            "contact_number",
            "whatsapp_number",
            "email",
            "nic",
            "date_of_birth",
            "created_at",
        ]
        read_only_fields = ("id", "created_at")

    def validate_name(self, value):
        return _sentence_case(value)

    def validate_position(self, value):
        return _sentence_case(value)
