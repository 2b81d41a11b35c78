from django.urls import path
from .views import (
    tender_list_create, tender_detail, tender_status_update,
    tender_items, tender_item_remove,
    tender_item_list_create, tender_item_detail,
)

urlpatterns = [
    # Tender endpoints
    path('tenders/', tender_list_create, name='tender-list-create'),
    path('tenders/<int:pk>/', tender_detail, name='tender-detail'),
    path('tenders/<int:pk>/status/', tender_status_update, name='tender-status-update'),
    path('tenders/<int:pk>/items/', tender_items, name='tender-items'),
    path('tenders/<int:tender_id>/items/<int:item_id>/', tender_item_remove, name='tender-item-remove'),

    # TenderItem endpoints
    path('tender-items/', tender_item_list_create, name='tender-item-list-create'),
    path('tender-items/<int:pk>/', tender_item_detail, name='tender-item-detail'),
]
