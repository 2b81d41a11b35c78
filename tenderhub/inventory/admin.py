from django.contrib import admin
from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['item_no', 'desc', 'unit', 'unit_cost', 'qty', 'category', 'updated_at']
    list_filter = ['category']
    search_fields = ['item_no', 'desc']
    ordering = ['item_no']
    raw_id_fields = ['category']
