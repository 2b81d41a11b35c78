from rest_framework import serializers
from .models import Bidder, Bid, BidItem
from tenderhub.tenders.models import Tender, TenderItem


class BidderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bidder
        fields = ['id', 'name', 'contact_person', 'email', 'phone', 'address', 'rating', 'verified',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class TenderItemSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = TenderItem
        fields = ['id', 'name', 'quantity', 'unit', 'estimated_price', 'category']


class BidItemSerializer(serializers.ModelSerializer):
    tender_item_detail = TenderItemSummarySerializer(source='tender_item', read_only=True)

    class Meta:
        model = BidItem
        fields = [
            'id', 'bid', 'tender_item', 'tender_item_detail', 'category', 'quantity', 'unit_price',
            'total_price', 'alternative_item', 'alternative_item_name', 'alternative_item_description',
            'alternative_item_sku', 'delivery_time_days', 'warranty_period_days', 'compliance_notes'
        ]
        read_only_fields = ['total_price']

    def validate(self, attrs):
        bid = attrs.get('bid', getattr(self.instance, 'bid', None))
        tender_item = attrs.get('tender_item', getattr(self.instance, 'tender_item', None))
        if bid is not None and tender_item is not None and tender_item.tender_id != bid.tender_id:
            raise serializers.ValidationError({'tender_item': "Tender item does not belong to the bid's tender"})
        # Repointing an item re-defaults its category unless one was sent
        if (self.instance is not None and 'tender_item' in attrs and 'category' not in attrs
                and attrs['tender_item'].pk != self.instance.tender_item_id):
            attrs['category'] = attrs['tender_item'].category
        return attrs


class BidItemInputSerializer(serializers.ModelSerializer):
    """Line item submitted together with a new bid"""

    class Meta:
        model = BidItem
        fields = [
            'tender_item', 'category', 'quantity', 'unit_price', 'alternative_item',
            'alternative_item_name', 'alternative_item_description', 'alternative_item_sku',
            'delivery_time_days', 'warranty_period_days', 'compliance_notes'
        ]


class BidSerializer(serializers.ModelSerializer):
    tender_title = serializers.CharField(source='tender.title', read_only=True)
    bidder_detail = BidderSerializer(source='bidder', read_only=True)
    items = BidItemSerializer(many=True, read_only=True)

    class Meta:
        model = Bid
        fields = [
            'id', 'tender', 'tender_title', 'bidder', 'bidder_detail', 'total_amount', 'status',
            'submission_date', 'submitted_at', 'notes', 'ai_score', 'items', 'updated_at'
        ]
        # Status moves only through the status endpoint so acceptance side effects always run
        read_only_fields = ['total_amount', 'status', 'submission_date', 'submitted_at', 'ai_score', 'updated_at']

    def validate_tender(self, value):
        if self.instance is not None and value.pk != self.instance.tender_id:
            raise serializers.ValidationError('The tender of an existing bid cannot be changed')
        return value


class BidSummarySerializer(serializers.ModelSerializer):
    bidder_detail = BidderSerializer(source='bidder', read_only=True)
    item_count = serializers.IntegerField(source='items.count', read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'bidder', 'bidder_detail', 'total_amount', 'status', 'submission_date',
                  'submitted_at', 'ai_score', 'item_count']


class BidCreateSerializer(serializers.Serializer):
    tender = serializers.PrimaryKeyRelatedField(queryset=Tender.objects.all())
    bidder = serializers.PrimaryKeyRelatedField(queryset=Bidder.objects.all())
    status = serializers.ChoiceField(choices=[('draft', 'Draft'), ('submitted', 'Submitted')], default='draft')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = BidItemInputSerializer(many=True, allow_empty=False)


class BidStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Bid.STATUS_CHOICES)
