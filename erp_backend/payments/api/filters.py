# payments/api/filters.py

import django_filters

from payments.models import Payment


class PaymentFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(
        field_name="payment_type", choices=Payment.PaymentType.choices
    )
    method = django_filters.ChoiceFilter(choices=Payment.Method.choices)
    ad_hoc = django_filters.BooleanFilter(method="filter_ad_hoc")
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    reference_number = django_filters.CharFilter(lookup_expr="startswith")

    class Meta:
        model = Payment
        fields = ["type", "method", "ad_hoc", "date_from", "date_to", "reference_number"]

    def filter_ad_hoc(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(purchase_order__isnull=True, sale_order__isnull=True)
        return queryset.exclude(purchase_order__isnull=True, sale_order__isnull=True)
