from django.urls import path
from .views import (
    TenderHubTokenObtainPairView, TenderHubTokenRefreshView, register, user_me,
    audit_log_list, audit_log_detail,
)

urlpatterns = [
    path('auth/register/', register, name='register'),
    path('auth/login/', TenderHubTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TenderHubTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
