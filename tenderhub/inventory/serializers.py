from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from .models import InventoryItem
from tenderhub.catalog.serializers import CategorySummarySerializer


class InventoryItemSerializer(serializers.ModelSerializer):
    category_detail = CategorySummarySerializer(source='category', read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['id', 'item_no', 'desc', 'unit', 'unit_cost', 'unit_weight', 'qty',
                  'category', 'category_detail', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'item_no': {
                'validators': [UniqueValidator(queryset=InventoryItem.objects.all(), message='Item number already exists')],
            },
        }

    def validate_item_no(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Item number is required')
        return value
