from django.contrib import admin
from .models import Bidder, Bid, BidItem


@admin.register(Bidder)
class BidderAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'email', 'phone', 'rating', 'verified']
    list_filter = ['verified', 'rating']
    search_fields = ['name', 'contact_person', 'email']


class BidItemInline(admin.TabularInline):
    model = BidItem
    extra = 0
    raw_id_fields = ['tender_item', 'category']
    readonly_fields = ['total_price']


@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ['id', 'tender', 'bidder', 'total_amount', 'status', 'ai_score', 'submission_date']
    list_filter = ['status', 'submission_date']
    search_fields = ['tender__title', 'bidder__name']
    readonly_fields = ['total_amount', 'submission_date', 'submitted_at']
    inlines = [BidItemInline]
