from django.urls import path
from .views import tender_stats, bidder_analytics

urlpatterns = [
    path('analytics/tender-stats/', tender_stats, name='tender-stats'),
    path('analytics/bidder-analytics/', bidder_analytics, name='bidder-analytics'),
]
