import django_filters
from django.db.models import Q

from .models import Invoice


class InvoiceFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.ChoiceFilter(choices=Invoice.STATUS_CHOICES)
    customer = django_filters.NumberFilter(field_name='customer_id')

    class Meta:
        model = Invoice
        fields = ['search', 'status', 'customer']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(invoice_number__icontains=value) | Q(customer__name__icontains=value))
