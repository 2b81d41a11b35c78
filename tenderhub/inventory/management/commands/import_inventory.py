"""
Management command to import inventory items from a CSV file
"""
import os
from django.core.management.base import BaseCommand, CommandError
from tenderhub.inventory.importers import InventoryImportError, import_csv


class Command(BaseCommand):
    help = "Imports inventory items from a CSV file (columns: item_no, desc, unit, unit_cost, unit_weight, qty, categoryId)"

    def add_arguments(self, parser):
        parser.add_argument('csv_file', type=str, help='Path to the CSV file')

    def handle(self, *args, **options):
        csv_file = options['csv_file']

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("IMPORTING INVENTORY ITEMS FROM CSV"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"CSV File: {csv_file}")

        if not os.path.exists(csv_file):
            raise CommandError(f"CSV file not found at {csv_file}")

        with open(csv_file, 'rb') as f:
            content = f.read()

        try:
            created, errors = import_csv(content)
        except InventoryImportError as e:
            raise CommandError(str(e))

        for item in created:
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created: {item.item_no}"))
        for error in errors:
            self.stdout.write(self.style.WARNING(f"  ⊘ {error}"))

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 80))
        self.stdout.write(self.style.SUCCESS("SUMMARY"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"Items Imported: {len(created)}")
        self.stdout.write(f"Rows Failed: {len(errors)}")
