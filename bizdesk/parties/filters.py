import django_filters
from django.db.models import Q

from .models import Customer


class CustomerFilter(django_filters.FilterSet):
    """Filter for the customer list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    type = django_filters.ChoiceFilter(field_name='customer_type', choices=Customer.TYPE_CHOICES)
    status = django_filters.ChoiceFilter(choices=Customer.STATUS_CHOICES)

    class Meta:
        model = Customer
        fields = ['search', 'type', 'status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(email__icontains=value) |
            Q(phone__icontains=value)
        )
