from django.urls import path
from .views import (
    category_list_create, category_detail,
    inventory_category_list_create, inventory_category_detail,
)

urlpatterns = [
    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/<int:pk>/', category_detail, name='category-detail'),

    # InventoryCategory endpoints
    path('inventory-categories/', inventory_category_list_create, name='inventory-category-list-create'),
    path('inventory-categories/<int:pk>/', inventory_category_detail, name='inventory-category-detail'),
]
