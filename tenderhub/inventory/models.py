from django.db import models
from decimal import Decimal
from tenderhub.catalog.models import Category


class InventoryItem(models.Model):
    """Stocked item identified by its item number"""
    item_no = models.CharField(max_length=100, unique=True)
    desc = models.TextField(blank=True, default='')
    unit = models.CharField(max_length=50, blank=True, default='')
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    unit_weight = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    qty = models.IntegerField()
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='inventory_items')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.item_no

    class Meta:
        db_table = 'inventory_items'
        ordering = ['item_no']
        indexes = [
            models.Index(fields=['category'], name='idx_inventory_category'),
        ]
