from rest_framework import serializers
from .models import AiInsight


class AiInsightSerializer(serializers.ModelSerializer):
    tender_title = serializers.CharField(source='tender.title', read_only=True, default=None)
    bidder_name = serializers.CharField(source='bidder.name', read_only=True, default=None)

    class Meta:
        model = AiInsight
        fields = ['id', 'tender', 'tender_title', 'bidder', 'bidder_name', 'type', 'title', 'description',
                  'severity', 'metadata', 'generated', 'created_at']
        read_only_fields = ['generated', 'created_at']
