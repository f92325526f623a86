import django_filters
from django.db.models import Q

from .models import InventoryItem


class InventoryItemFilter(django_filters.FilterSet):
    """Filter for the inventory list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    status = django_filters.ChoiceFilter(choices=InventoryItem.STATUS_CHOICES)

    class Meta:
        model = InventoryItem
        fields = ['search', 'category', 'status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(description__icontains=value) |
            Q(supplier__icontains=value)
        )
