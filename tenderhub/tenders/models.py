from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from tenderhub.catalog.models import Category


class Tender(models.Model):
    """A request for bids on a set of line items"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
        ('closed', 'Closed'),
        ('awarded', 'Awarded'),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='tenders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(help_text='Bid submission deadline')
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='tenders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date must be on or after the start date'})

    @property
    def is_open_for_bids(self):
        return self.status == 'published'

    class Meta:
        db_table = 'tenders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_tender_status'),
            models.Index(fields=['category'], name='idx_tender_category'),
        ]


class TenderItem(models.Model):
    """A line item requested by a tender"""
    tender = models.ForeignKey(Tender, on_delete=models.CASCADE, related_name='items')
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='tender_items')
    name = models.CharField(max_length=255, blank=True, default='')
    description = models.TextField(blank=True, default='')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit = models.CharField(max_length=50, default='pcs', help_text='e.g. pcs, kg, m')
    estimated_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    specifications = models.TextField(blank=True, default='')
    sku = models.CharField(max_length=100, blank=True, default='')
    min_quantity = models.PositiveIntegerField(default=0)
    current_stock = models.PositiveIntegerField(default=0)
    location = models.CharField(max_length=255, blank=True, default='')
    last_updated = models.DateTimeField(auto_now=True)

    def __str__(self):
        label = self.name or self.category.name
        return f"{label} x {self.quantity} {self.unit}"

    class Meta:
        db_table = 'tender_items'
        ordering = ['id']
