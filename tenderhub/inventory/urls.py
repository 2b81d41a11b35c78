from django.urls import path
from .views import inventory_item_list_create, inventory_item_detail, inventory_item_bulk_import

urlpatterns = [
    path('inventory-items/', inventory_item_list_create, name='inventory-item-list-create'),
    path('inventory-items/bulk-import/', inventory_item_bulk_import, name='inventory-item-bulk-import'),
    path('inventory-items/<int:pk>/', inventory_item_detail, name='inventory-item-detail'),
]
