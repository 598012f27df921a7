import django_filters
from django.db.models import Q

from common.enums import Currency, PayableKind
from payments.models import Payment


class PaymentFilter(django_filters.FilterSet):
    currency = django_filters.ChoiceFilter(choices=Currency.choices)
    payment_method = django_filters.CharFilter()
    method = django_filters.CharFilter(field_name='methods__method', distinct=True)
    kind = django_filters.ChoiceFilter(choices=PayableKind.choices, field_name='content_type__model')
    start_date = django_filters.DateFilter(field_name='payment_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='payment_date', lookup_expr='lte')
    membership = django_filters.NumberFilter(method='filter_membership')
    client = django_filters.CharFilter(method='filter_client')

    class Meta:
        model = Payment
        fields = ['currency', 'payment_method', 'method', 'kind', 'start_date', 'end_date']

    def filter_membership(self, queryset, name, value):
        return queryset.filter(Q(membership__id=value) | Q(renewal__membership_id=value)).distinct()

    def filter_client(self, queryset, name, value):
        return queryset.filter(
            Q(membership__client__name__icontains=value)
            | Q(renewal__membership__client__name__icontains=value)
        ).distinct()
