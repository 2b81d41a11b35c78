from django.db import models
from tenderhub.tenders.models import Tender
from tenderhub.bidding.models import Bidder


class AiInsight(models.Model):
    """Rule-derived note shown on the dashboard, optionally tied to a tender and/or bidder"""
    TYPE_CHOICES = [
        ('price_trend', 'Price Trend'),
        ('recommendation', 'Recommendation'),
        ('warning', 'Warning'),
    ]

    SEVERITY_CHOICES = [
        ('info', 'Info'),
        ('success', 'Success'),
        ('warning', 'Warning'),
        ('alert', 'Alert'),
    ]

    tender = models.ForeignKey(Tender, on_delete=models.CASCADE, null=True, blank=True, related_name='ai_insights')
    bidder = models.ForeignKey(Bidder, on_delete=models.CASCADE, null=True, blank=True, related_name='ai_insights')
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField()
    severity = models.CharField(max_length=20, choices=SEVERITY_CHOICES, default='info')
    metadata = models.JSONField(default=dict, blank=True)
    generated = models.BooleanField(default=False, help_text='Created by the insight generator rather than by hand')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"[{self.type}] {self.title}"

    class Meta:
        db_table = 'ai_insights'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['tender'], name='idx_insight_tender'),
            models.Index(fields=['bidder'], name='idx_insight_bidder'),
        ]
