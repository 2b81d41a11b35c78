"""
Test utilities and factories for creating test data
"""
from datetime import timedelta
from decimal import Decimal
import random
import string
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from tenderhub.catalog.models import Category
from tenderhub.inventory.models import InventoryItem
from tenderhub.tenders.models import Tender, TenderItem
from tenderhub.bidding.models import Bidder, Bid, BidItem
from tenderhub.insights.models import AiInsight

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='user', is_staff=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_staff=is_staff,
        )

    @staticmethod
    def create_category(name=None, code=None, cat_type='MATERIALS', parent=None):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            code=code,
            cat_type=cat_type,
            parent=parent,
            description=f'Test category {name}',
        )

    @staticmethod
    def create_inventory_item(item_no=None, category=None, qty=10, unit='pcs', unit_cost=None):
        """Create a test inventory item"""
        if not item_no:
            item_no = f'ITEM-{TestDataFactory.random_string(8).upper()}'
        if not category:
            category = TestDataFactory.create_category()
        return InventoryItem.objects.create(
            item_no=item_no,
            desc=f'Test item {item_no}',
            unit=unit,
            unit_cost=unit_cost if unit_cost is not None else Decimal('10.00'),
            qty=qty,
            category=category,
        )

    @staticmethod
    def create_tender(title=None, category=None, status='published', created_by=None, days_open=14):
        """Create a test tender"""
        if not title:
            title = f'Tender_{TestDataFactory.random_string(6)}'
        if not category:
            category = TestDataFactory.create_category()
        start = timezone.now()
        return Tender.objects.create(
            title=title,
            description=f'Test tender {title}',
            category=category,
            status=status,
            start_date=start,
            end_date=start + timedelta(days=days_open),
            created_by=created_by,
        )

    @staticmethod
    def create_tender_item(tender, name=None, quantity=10, estimated_price=None, category=None):
        """Create a test tender item"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        return TenderItem.objects.create(
            tender=tender,
            category=category or tender.category,
            name=name,
            quantity=quantity,
            unit='pcs',
            estimated_price=estimated_price,
        )

    @staticmethod
    def create_bidder(name=None, verified=True, rating=4):
        """Create a test bidder"""
        if not name:
            name = f'Bidder_{TestDataFactory.random_string(6)}'
        return Bidder.objects.create(
            name=name,
            contact_person=f'Contact {name}',
            email=f'{name.lower()}@test.com',
            phone='1234567890',
            rating=rating,
            verified=verified,
        )

    @staticmethod
    def create_bid(tender, bidder=None, status='submitted', total_amount=None):
        """Create a test bid without items"""
        if not bidder:
            bidder = TestDataFactory.create_bidder()
        return Bid.objects.create(
            tender=tender,
            bidder=bidder,
            status=status,
            total_amount=total_amount if total_amount is not None else Decimal('0.00'),
        )

    @staticmethod
    def create_bid_item(bid, tender_item, quantity=None, unit_price=None):
        """Create a test bid item and refresh the bid total"""
        item = BidItem.objects.create(
            bid=bid,
            tender_item=tender_item,
            quantity=quantity if quantity is not None else tender_item.quantity,
            unit_price=unit_price if unit_price is not None else Decimal('10.00'),
        )
        bid.recalculate_total()
        return item

    @staticmethod
    def create_insight(tender=None, bidder=None, type='recommendation', severity='info', title=None):
        """Create a test insight"""
        return AiInsight.objects.create(
            tender=tender,
            bidder=bidder,
            type=type,
            severity=severity,
            title=title or f'Insight_{TestDataFactory.random_string(6)}',
            description='Test insight',
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
