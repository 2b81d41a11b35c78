from django.contrib import admin
from .models import Category, InventoryCategory


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'cat_type', 'parent', 'created_at']
    list_filter = ['cat_type', 'created_at']
    search_fields = ['name', 'code', 'description']
    ordering = ['name']


@admin.register(InventoryCategory)
class InventoryCategoryAdmin(admin.ModelAdmin):
    list_display = ['code', 'name']
    search_fields = ['code', 'name']
    ordering = ['code']
