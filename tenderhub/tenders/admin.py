from django.contrib import admin
from .models import Tender, TenderItem


class TenderItemInline(admin.TabularInline):
    model = TenderItem
    extra = 0
    raw_id_fields = ['category']


@admin.register(Tender)
class TenderAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'status', 'start_date', 'end_date', 'created_by', 'created_at']
    list_filter = ['status', 'category', 'created_at']
    search_fields = ['title', 'description']
    ordering = ['-created_at']
    inlines = [TenderItemInline]


@admin.register(TenderItem)
class TenderItemAdmin(admin.ModelAdmin):
    list_display = ['tender', 'name', 'category', 'quantity', 'unit', 'estimated_price']
    list_filter = ['category']
    search_fields = ['name', 'sku', 'tender__title']
    raw_id_fields = ['tender', 'category']
