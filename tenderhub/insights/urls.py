from django.urls import path
from .views import (
    ai_insight_list_create, ai_insight_detail,
    tender_ai_insights, bidder_ai_insights, tender_ai_insights_generate,
)

urlpatterns = [
    path('ai-insights/', ai_insight_list_create, name='ai-insight-list-create'),
    path('ai-insights/<int:pk>/', ai_insight_detail, name='ai-insight-detail'),
    path('tenders/<int:pk>/ai-insights/', tender_ai_insights, name='tender-ai-insights'),
    path('tenders/<int:pk>/ai-insights/generate/', tender_ai_insights_generate, name='tender-ai-insights-generate'),
    path('bidders/<int:pk>/ai-insights/', bidder_ai_insights, name='bidder-ai-insights'),
]
