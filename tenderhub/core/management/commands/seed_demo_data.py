"""
Management command to load demo categories, bidders, tenders, bids and insights
"""
from datetime import timedelta
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from tenderhub.catalog.models import Category, InventoryCategory
from tenderhub.tenders.models import Tender, TenderItem
from tenderhub.bidding.models import Bidder, Bid, BidItem
from tenderhub.insights.models import AiInsight
from tenderhub.core.cache_signals import suspend_cache_signals
from tenderhub.core.cache_utils import invalidate_reports_cache

User = get_user_model()

CATEGORIES = [
    # (code, name, cat_type, description)
    ('HEQ', 'Heavy Equipment', 'EQUIPMENT', 'Construction and industrial heavy machinery'),
    ('LEQ', 'Light Equipment', 'EQUIPMENT', 'Portable tools and light machinery'),
    ('BMA', 'Building Materials', 'MATERIALS', 'Cement, steel, timber and masonry'),
    ('EMA', 'Electrical Materials', 'MATERIALS', 'Cables, fittings and electrical components'),
    ('PMA', 'Plumbing Materials', 'MATERIALS', 'Pipes, fittings and fixtures'),
    ('PSV', 'Professional Services', 'SERVICES', 'Consulting, design and supervision'),
    ('LSV', 'Logistics Services', 'SERVICES', 'Transport, storage and delivery'),
]

INVENTORY_CATEGORIES = [
    ('PLUMB', 'Plumbing Supplies', 'Pipes, fittings, and fixtures for water systems'),
    ('CONSTR', 'Construction Materials', 'Basic building materials like cement, wood, and bricks'),
    ('ELECT', 'Electrical Components', 'Wiring, connectors, and electrical equipment'),
    ('HVAC', 'HVAC Equipment', 'Heating, ventilation, and air conditioning equipment'),
    ('TOOLS', 'Tools & Hardware', 'Hand tools, power tools, and hardware items'),
]

BIDDERS = [
    # (name, contact_person, email, phone, address, rating)
    ('ABC Contractors', 'John Smith', 'john@abccontractors.com', '+1234567890', '123 Main St, City', 4),
    ('XYZ Supplies', 'Jane Doe', 'jane@xyzsupplies.com', '+0987654321', '456 Oak Ave, Town', 5),
    ('City Builders', 'Mike Johnson', 'mike@citybuilders.com', '+1122334455', '789 Pine Rd, Village', 3),
]


class Command(BaseCommand):
    help = "Loads demo data (categories, bidders, tenders, bids and insights)"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing tenders, bids, bidders, insights and categories first',
        )
        parser.add_argument(
            '--admin-password',
            type=str,
            default='password',
            help='Password for the demo admin user (created if missing)',
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("SEEDING DEMO DATA"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        with suspend_cache_signals(), transaction.atomic():
            if options['clear']:
                self.stdout.write(self.style.WARNING("Clearing existing demo data..."))
                AiInsight.objects.all().delete()
                Bid.objects.all().delete()
                Tender.objects.all().delete()
                Bidder.objects.all().delete()
                Category.objects.filter(inventory_items__isnull=True).delete()
                InventoryCategory.objects.all().delete()

            admin = self._seed_admin(options['admin_password'])
            categories = self._seed_categories()
            self._seed_inventory_categories()
            bidders = self._seed_bidders()
            tenders = self._seed_tenders(admin, categories)
            self._seed_bids(tenders, bidders)
            self._seed_insights(tenders, bidders)

        invalidate_reports_cache()
        self.stdout.write(self.style.SUCCESS("\nDemo data loaded."))

    def _seed_admin(self, password):
        admin, created = User.objects.get_or_create(
            username='admin',
            defaults={'email': 'admin@example.com', 'full_name': 'Administrator', 'role': 'admin',
                      'is_staff': True, 'is_superuser': True},
        )
        if created:
            admin.set_password(password)
            admin.save()
            self.stdout.write(self.style.SUCCESS("  ✓ Created admin user"))
        return admin

    def _seed_categories(self):
        categories = {}
        for code, name, cat_type, description in CATEGORIES:
            category, created = Category.objects.get_or_create(
                code=code,
                defaults={'name': name, 'cat_type': cat_type, 'description': description},
            )
            categories[code] = category
            if created:
                self.stdout.write(self.style.SUCCESS(f"  ✓ Category: {code} {name}"))
        return categories

    def _seed_inventory_categories(self):
        for code, name, description in INVENTORY_CATEGORIES:
            InventoryCategory.objects.get_or_create(code=code, defaults={'name': name, 'description': description})

    def _seed_bidders(self):
        bidders = []
        for name, contact, email, phone, address, rating in BIDDERS:
            bidder, created = Bidder.objects.get_or_create(
                email=email,
                defaults={'name': name, 'contact_person': contact, 'phone': phone,
                          'address': address, 'rating': rating, 'verified': True},
            )
            bidders.append(bidder)
            if created:
                self.stdout.write(self.style.SUCCESS(f"  ✓ Bidder: {name}"))
        return bidders

    def _seed_tenders(self, admin, categories):
        now = timezone.now()
        specs = [
            ('Community Center Plumbing Materials', 'Supply of plumbing materials for community center construction',
             'PMA', 'published', [
                 ('PVC Pipes 2"', '2 inch PVC pipes', 50, 'meters', '5.50', 'PVC-200'),
                 ('PVC Elbow Joints', '2 inch PVC elbow joints', 20, 'pcs', '1.20', 'PVC-ELB'),
                 ('Water Taps', 'Stainless steel water taps', 10, 'pcs', '8.50', 'TAP-SS'),
             ]),
            ('School Renovation Hardware Supplies', 'Hardware supplies for school renovation project',
             'BMA', 'published', [
                 ('Door Hinges', 'Metal door hinges', 40, 'pcs', '2.50', 'HNG-MTL'),
                 ('Door Handles', 'Metal door handles', 20, 'pcs', '4.00', 'HDL-MTL'),
             ]),
            ('Healthcare Facility Equipment', 'Equipment for new healthcare facility',
             'HEQ', 'awarded', [
                 ('Hospital Beds', 'Standard hospital beds', 10, 'pcs', '250.00', 'BED-STD'),
                 ('Examination Tables', 'Medical examination tables', 3, 'pcs', '300.00', 'TABLE-MED'),
             ]),
        ]

        tenders = []
        for title, description, code, status, items in specs:
            tender, created = Tender.objects.get_or_create(
                title=title,
                defaults={'description': description, 'category': categories[code], 'status': status,
                          'start_date': now - timedelta(days=10), 'end_date': now + timedelta(days=20),
                          'created_by': admin},
            )
            if created:
                for name, item_desc, quantity, unit, price, sku in items:
                    TenderItem.objects.create(
                        tender=tender, category=categories[code], name=name, description=item_desc,
                        quantity=quantity, unit=unit, estimated_price=Decimal(price), sku=sku,
                        location='Warehouse A',
                    )
                self.stdout.write(self.style.SUCCESS(f"  ✓ Tender: {title}"))
            tenders.append(tender)
        return tenders

    def _seed_bids(self, tenders, bidders):
        # (tender index, bidder index, status, unit price factor, notes, ai_score)
        plan = [
            (0, 0, 'submitted', Decimal('0.95'), 'Can deliver within 2 weeks', 85),
            (0, 1, 'submitted', Decimal('1.05'), 'Premium quality materials', 78),
            (1, 0, 'under_review', Decimal('0.90'), 'Fast delivery guaranteed', 90),
            (1, 2, 'under_review', Decimal('1.40'), 'Best quality in market', 82),
            (2, 1, 'accepted', Decimal('1.00'), 'Medical grade equipment', 92),
        ]
        for tender_index, bidder_index, status, factor, notes, score in plan:
            tender = tenders[tender_index]
            bidder = bidders[bidder_index]
            if Bid.objects.filter(tender=tender, bidder=bidder).exists():
                continue
            bid = Bid.objects.create(
                tender=tender, bidder=bidder, status=status, notes=notes, ai_score=score,
                submitted_at=timezone.now() if status != 'draft' else None,
            )
            for tender_item in tender.items.all():
                BidItem.objects.create(
                    bid=bid, tender_item=tender_item, quantity=tender_item.quantity,
                    unit_price=(tender_item.estimated_price * factor).quantize(Decimal('0.01')),
                    delivery_time_days=7, warranty_period_days=365,
                    compliance_notes='Meets specification requirements',
                )
            bid.recalculate_total()
            self.stdout.write(self.style.SUCCESS(f"  ✓ Bid: {bidder.name} on {tender.title} ({bid.total_amount})"))

    def _seed_insights(self, tenders, bidders):
        if AiInsight.objects.exists():
            return
        AiInsight.objects.create(
            tender=tenders[0],
            type='price_trend',
            title='Rising PVC Pipe Prices',
            description='Current market analysis indicates PVC pipe prices are expected to rise by 8% '
                        'in the next month. Consider expediting procurement.',
            severity='warning',
        )
        AiInsight.objects.create(
            tender=tenders[0],
            bidder=bidders[1],
            type='recommendation',
            title='Highly Recommended Supplier',
            description=f'{bidders[1].name} has consistently delivered high-quality materials on time '
                        'in the past 10 projects.',
            severity='info',
        )
        AiInsight.objects.create(
            type='warning',
            title='Supplier Concentration',
            description='Most recent awards went to a single supplier. Consider widening the bidder pool.',
            severity='warning',
            metadata={'window_days': 90},
        )
        self.stdout.write(self.style.SUCCESS("  ✓ Insights created"))
