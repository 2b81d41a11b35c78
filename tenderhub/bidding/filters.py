import django_filters
from django.db.models import Q
from .models import Bid, Bidder


class BidFilter(django_filters.FilterSet):
    """Filter for Bid list"""
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')
    tender = django_filters.NumberFilter(field_name='tender_id', lookup_expr='exact')
    bidder = django_filters.NumberFilter(field_name='bidder_id', lookup_expr='exact')

    class Meta:
        model = Bid
        fields = ['status', 'tender', 'bidder']


class BidderFilter(django_filters.FilterSet):
    """Filter for Bidder list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    verified = django_filters.BooleanFilter(field_name='verified')

    class Meta:
        model = Bidder
        fields = ['search', 'verified']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(contact_person__icontains=value) | Q(email__icontains=value)
        )
