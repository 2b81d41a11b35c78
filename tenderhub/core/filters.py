import django_filters
from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    """Filter for the audit trail (model + object_id gives one row's history)"""
    action = django_filters.CharFilter(field_name='action', lookup_expr='exact')
    model = django_filters.CharFilter(field_name='model_name', lookup_expr='exact')
    object_id = django_filters.CharFilter(field_name='object_id', lookup_expr='exact')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['action', 'model', 'object_id', 'date_from', 'date_to']
