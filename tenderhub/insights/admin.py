from django.contrib import admin
from .models import AiInsight


@admin.register(AiInsight)
class AiInsightAdmin(admin.ModelAdmin):
    list_display = ['title', 'type', 'severity', 'tender', 'bidder', 'generated', 'created_at']
    list_filter = ['type', 'severity', 'generated']
    search_fields = ['title', 'description', 'tender__title', 'bidder__name']
    raw_id_fields = ['tender', 'bidder']
