import django_filters
from django.db.models import Q
from .models import InventoryItem


class InventoryItemFilter(django_filters.FilterSet):
    """Filter for InventoryItem list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')

    class Meta:
        model = InventoryItem
        fields = ['search', 'category']

    def filter_search(self, queryset, name, value):
        """Match item number or description"""
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(item_no__icontains=value) | Q(desc__icontains=value))
