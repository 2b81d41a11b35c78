"""
URL configuration for the tenderhub project.

Every app mounts its routes under /api/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "TenderHub Administration"
admin.site.site_title = "TenderHub Admin Portal"
admin.site.index_title = "Tenders, bids and inventory"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('tenderhub.core.urls')),
    path('api/', include('tenderhub.catalog.urls')),
    path('api/', include('tenderhub.inventory.urls')),
    path('api/', include('tenderhub.tenders.urls')),
    path('api/', include('tenderhub.bidding.urls')),
    path('api/', include('tenderhub.insights.urls')),
    path('api/', include('tenderhub.reports.urls')),
]
