import django_filters
from django.db.models import Q
from .models import Tender


class TenderFilter(django_filters.FilterSet):
    """Filter for Tender list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')

    class Meta:
        model = Tender
        fields = ['search', 'status', 'category']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
