import django_filters
from django.db.models import Q

from .models import DaybookEntry, LedgerEntry, TYPE_CHOICES


class DaybookEntryFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    type = django_filters.ChoiceFilter(field_name='entry_type', choices=TYPE_CHOICES)
    status = django_filters.ChoiceFilter(choices=DaybookEntry.STATUS_CHOICES)
    payment_method = django_filters.ChoiceFilter(choices=DaybookEntry.PAYMENT_METHOD_CHOICES)
    date_from = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = DaybookEntry
        fields = ['search', 'type', 'status', 'payment_method', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(description__icontains=value) |
            Q(reference__icontains=value) |
            Q(category__icontains=value)
        )


class LedgerEntryFilter(django_filters.FilterSet):
    """`type=all` (or no type) lists every ledger"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    type = django_filters.CharFilter(method='filter_type', label='Ledger type')
    transaction_type = django_filters.ChoiceFilter(choices=LedgerEntry.TRANSACTION_TYPE_CHOICES)
    date_from = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = LedgerEntry
        fields = ['search', 'type', 'transaction_type', 'date_from', 'date_to']

    def filter_type(self, queryset, name, value):
        value = value.strip().upper()
        if not value or value == 'ALL':
            return queryset
        return queryset.filter(ledger_type=value)

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) |
            Q(description__icontains=value) |
            Q(reference__icontains=value)
        )
