from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from .models import Category, InventoryCategory


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'code', 'cat_type']


class CategorySerializer(serializers.ModelSerializer):
    children = CategorySummarySerializer(many=True, read_only=True)
    parent_name = serializers.CharField(source='parent.name', read_only=True, default=None)

    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'code', 'cat_type', 'parent', 'parent_name', 'children', 'created_at', 'updated_at']
        extra_kwargs = {
            'code': {
                'validators': [UniqueValidator(queryset=Category.objects.all(), message='Category code already exists')],
            },
        }

    def validate_code(self, value):
        # Empty codes are stored as NULL so the unique constraint ignores them
        return value or None

    def validate_parent(self, parent):
        if parent is None or self.instance is None:
            return parent
        if parent.pk == self.instance.pk:
            raise serializers.ValidationError('Category cannot be its own parent')
        ancestor = parent.parent
        while ancestor is not None:
            if ancestor.pk == self.instance.pk:
                raise serializers.ValidationError('Category cannot be moved under one of its own subcategories')
            ancestor = ancestor.parent
        return parent


class InventoryCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryCategory
        fields = ['id', 'name', 'description', 'code']
