from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Sum
from tenderhub.catalog.models import Category
from tenderhub.tenders.models import Tender, TenderItem


class Bidder(models.Model):
    """Supplier that submits bids on tenders"""
    name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=50)
    address = models.TextField(blank=True, default='')
    rating = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'bidders'
        ordering = ['name']


class Bid(models.Model):
    """A bidder's priced response to a tender"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('submitted', 'Submitted'),
        ('under_review', 'Under Review'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
    ]

    tender = models.ForeignKey(Tender, on_delete=models.CASCADE, related_name='bids')
    bidder = models.ForeignKey(Bidder, on_delete=models.PROTECT, related_name='bids')
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    submission_date = models.DateTimeField(auto_now_add=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    ai_score = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Bid-{self.id} ({self.bidder} on {self.tender})"

    def recalculate_total(self):
        """Set total_amount to the sum of the item totals and save it"""
        total = self.items.aggregate(total=Sum('total_price'))['total'] or Decimal('0.00')
        self.total_amount = total
        self.save(update_fields=['total_amount', 'updated_at'])
        return total

    class Meta:
        db_table = 'bids'
        ordering = ['-submission_date']
        indexes = [
            models.Index(fields=['status'], name='idx_bid_status'),
            models.Index(fields=['tender', 'status'], name='idx_bid_tender_status'),
        ]


class BidItem(models.Model):
    """A priced line within a bid, answering one tender item"""
    bid = models.ForeignKey(Bid, on_delete=models.CASCADE, related_name='items')
    tender_item = models.ForeignKey(TenderItem, on_delete=models.CASCADE, related_name='bid_items')
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='bid_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    alternative_item = models.BooleanField(default=False)
    alternative_item_name = models.CharField(max_length=255, blank=True, default='')
    alternative_item_description = models.TextField(blank=True, default='')
    alternative_item_sku = models.CharField(max_length=100, blank=True, default='')
    delivery_time_days = models.PositiveIntegerField(null=True, blank=True)
    warranty_period_days = models.PositiveIntegerField(null=True, blank=True)
    compliance_notes = models.TextField(blank=True, default='')

    def __str__(self):
        return f"{self.tender_item} @ {self.unit_price}"

    def get_line_total(self):
        return (self.unit_price or Decimal('0')) * self.quantity

    def clean(self):
        if self.bid_id and self.tender_item_id and self.tender_item.tender_id != self.bid.tender_id:
            raise ValidationError({'tender_item': "Tender item does not belong to the bid's tender"})

    def save(self, *args, **kwargs):
        if self.category_id is None and self.tender_item_id:
            self.category_id = self.tender_item.category_id
        self.total_price = self.get_line_total()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'bid_items'
        ordering = ['id']
