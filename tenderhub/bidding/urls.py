from django.urls import path
from .views import (
    bidder_list_create, bidder_detail, bidder_bids,
    bid_list_create, bid_detail, tender_bids, bid_status_update, bid_items,
    bid_item_list_create, bid_item_detail,
)

urlpatterns = [
    # Bidder endpoints
    path('bidders/', bidder_list_create, name='bidder-list-create'),
    path('bidders/<int:pk>/', bidder_detail, name='bidder-detail'),
    path('bidders/<int:pk>/bids/', bidder_bids, name='bidder-bids'),

    # Bid endpoints
    path('bids/', bid_list_create, name='bid-list-create'),
    path('bids/<int:pk>/', bid_detail, name='bid-detail'),
    path('bids/<int:pk>/status/', bid_status_update, name='bid-status-update'),
    path('bids/<int:pk>/items/', bid_items, name='bid-items'),
    path('tenders/<int:pk>/bids/', tender_bids, name='tender-bids'),

    # BidItem endpoints
    path('bid-items/', bid_item_list_create, name='bid-item-list-create'),
    path('bid-items/<int:pk>/', bid_item_detail, name='bid-item-detail'),
]
