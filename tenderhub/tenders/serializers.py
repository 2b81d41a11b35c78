from django.db import transaction
from rest_framework import serializers
from .models import Tender, TenderItem
from tenderhub.catalog.models import Category
from tenderhub.catalog.serializers import CategorySummarySerializer


class TenderItemSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), required=False)
    category_detail = CategorySummarySerializer(source='category', read_only=True)

    class Meta:
        model = TenderItem
        fields = [
            'id', 'tender', 'category', 'category_detail', 'name', 'description', 'quantity', 'unit',
            'estimated_price', 'specifications', 'sku', 'min_quantity', 'current_stock', 'location',
            'last_updated'
        ]
        read_only_fields = ['last_updated']

    def validate_tender(self, value):
        # Bid items must stay within their bid's tender
        if self.instance is not None and value.pk != self.instance.tender_id:
            raise serializers.ValidationError('The tender of an existing tender item cannot be changed')
        return value

    def validate(self, attrs):
        # Items without their own category inherit the tender's
        if self.instance is None and not attrs.get('category') and attrs.get('tender'):
            attrs['category'] = attrs['tender'].category
        return attrs


class TenderItemNestedSerializer(TenderItemSerializer):
    """Tender item written as part of a tender (the tender comes from the URL or parent)"""

    class Meta(TenderItemSerializer.Meta):
        fields = [f for f in TenderItemSerializer.Meta.fields if f != 'tender']


class TenderSerializer(serializers.ModelSerializer):
    category_detail = CategorySummarySerializer(source='category', read_only=True)
    items = TenderItemNestedSerializer(many=True, required=False)
    created_by_name = serializers.SerializerMethodField()
    bid_count = serializers.IntegerField(source='bids.count', read_only=True)

    class Meta:
        model = Tender
        fields = [
            'id', 'title', 'description', 'category', 'category_detail', 'status', 'start_date',
            'end_date', 'created_by', 'created_by_name', 'items', 'bid_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def get_created_by_name(self, obj):
        return str(obj.created_by) if obj.created_by else None

    def validate(self, attrs):
        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({'end_date': 'End date must be on or after the start date'})
        return attrs

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        with transaction.atomic():
            tender = Tender.objects.create(**validated_data)
            for item_data in items_data:
                item_data.setdefault('category', tender.category)
                TenderItem.objects.create(tender=tender, **item_data)
        return tender

    def update(self, instance, validated_data):
        # Line items are edited through the tender item endpoints
        validated_data.pop('items', None)
        return super().update(instance, validated_data)


class TenderDetailSerializer(TenderSerializer):
    bids = serializers.SerializerMethodField()

    class Meta(TenderSerializer.Meta):
        fields = TenderSerializer.Meta.fields + ['bids']

    def get_bids(self, obj):
        from tenderhub.bidding.serializers import BidSummarySerializer
        bids = obj.bids.select_related('bidder').prefetch_related('items')
        return BidSummarySerializer(bids, many=True).data


class TenderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Tender.STATUS_CHOICES)
