"""
CSV import of inventory items.

Shared by the bulk-import endpoint and the ``import_inventory`` management
command. File-level problems raise ``InventoryImportError``; row-level
problems are collected and the offending rows skipped.
"""
import csv
import io
import logging
from decimal import Decimal, InvalidOperation
from django.db import transaction
from tenderhub.catalog.models import Category
from .models import InventoryItem

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['item_no', 'unit', 'qty', 'categoryId']


class InventoryImportError(Exception):
    """The uploaded file cannot be imported at all"""


def _parse_decimal(value):
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal('0')
    return number if number.is_finite() else Decimal('0')


def _parse_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(Decimal(value))
    except (InvalidOperation, OverflowError, TypeError, ValueError):
        return None


def read_rows(content):
    """
    Parse CSV text into a list of row dicts with trimmed keys and values.

    Raises InventoryImportError for empty content, missing columns or a
    header without data rows.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8-sig')
        except UnicodeDecodeError:
            raise InventoryImportError('File must be UTF-8 encoded text')

    if not content.strip():
        raise InventoryImportError('The uploaded file is empty')

    reader = csv.DictReader(io.StringIO(content))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise InventoryImportError(f"Missing required columns: {', '.join(missing)}")

    rows = []
    for raw in reader:
        row = {
            (key or '').strip(): (value or '').strip() if isinstance(value, str) else ''
            for key, value in raw.items()
        }
        if not any(row.values()):
            continue
        rows.append(row)

    if not rows:
        raise InventoryImportError('No valid records found in CSV file')
    return rows


def import_rows(rows):
    """
    Create inventory items from parsed rows.

    Returns (created_items, errors). Each row is saved in its own savepoint
    so one bad row never rolls back the others.
    """
    created = []
    errors = []
    seen_item_numbers = set()

    for row in rows:
        item_no = row.get('item_no', '')
        category_id = _parse_int(row.get('categoryId'))

        if not item_no or not category_id:
            errors.append(f"Row with item_no {item_no or 'unknown'}: Missing required fields")
            continue

        category = Category.objects.filter(pk=category_id).first()
        if category is None:
            errors.append(f"Row with item_no {item_no}: Invalid category ID {category_id}")
            continue

        if item_no in seen_item_numbers or InventoryItem.objects.filter(item_no=item_no).exists():
            errors.append(f"Row with item_no {item_no}: Item number already exists")
            continue

        try:
            with transaction.atomic():
                item = InventoryItem.objects.create(
                    item_no=item_no,
                    desc=row.get('desc', ''),
                    unit=row.get('unit', ''),
                    unit_cost=_parse_decimal(row.get('unit_cost')),
                    unit_weight=_parse_decimal(row.get('unit_weight')),
                    qty=_parse_int(row.get('qty')) or 0,
                    category=category,
                )
        except Exception as e:
            logger.warning(f"Inventory import failed for item_no {item_no}: {str(e)}")
            errors.append(f"Error processing row with item_no {item_no}: {str(e)}")
            continue

        seen_item_numbers.add(item_no)
        created.append(item)

    logger.info(f"Inventory import finished: {len(created)} imported, {len(errors)} failed")
    return created, errors


def import_csv(content):
    """Parse and import CSV content in one call"""
    return import_rows(read_rows(content))
