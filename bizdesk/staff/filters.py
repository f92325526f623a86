import django_filters
from django.db.models import Q

from .models import StaffMember


class StaffMemberFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    department = django_filters.CharFilter(field_name='department', lookup_expr='iexact')
    status = django_filters.ChoiceFilter(choices=StaffMember.STATUS_CHOICES)

    class Meta:
        model = StaffMember
        fields = ['search', 'department', 'status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(email__icontains=value) |
            Q(phone__icontains=value) |
            Q(position__icontains=value)
        )
