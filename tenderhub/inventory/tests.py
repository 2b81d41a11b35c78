"""
Test suite for the inventory module
Tests: item CRUD, filtering, CSV bulk import (file checks and row validation), import command
"""
import os
import tempfile
from decimal import Decimal
from io import StringIO
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from rest_framework import status
from tenderhub.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from tenderhub.core.models import AuditLog
from tenderhub.inventory.models import InventoryItem
from tenderhub.inventory.importers import InventoryImportError, read_rows, import_rows


class InventoryItemAPITests(TestCase):
    """Test InventoryItem API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category()

    def test_list_ordered_by_item_no(self):
        TestDataFactory.create_inventory_item(item_no='B-002', category=self.category)
        TestDataFactory.create_inventory_item(item_no='A-001', category=self.category)
        response = self.client.get('/api/inventory-items/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['item_no'] for item in response.data], ['A-001', 'B-002'])
        self.assertEqual(response.data[0]['category_detail']['id'], self.category.id)

    def test_list_filters(self):
        other = TestDataFactory.create_category()
        TestDataFactory.create_inventory_item(item_no='PIPE-1', category=self.category)
        TestDataFactory.create_inventory_item(item_no='TAP-1', category=other)
        response = self.client.get('/api/inventory-items/?search=pipe')
        self.assertEqual([item['item_no'] for item in response.data], ['PIPE-1'])
        response = self.client.get(f'/api/inventory-items/?category={other.id}')
        self.assertEqual([item['item_no'] for item in response.data], ['TAP-1'])

    def test_create_item(self):
        data = {'item_no': 'PVC-200', 'desc': 'PVC pipe', 'unit': 'm', 'unit_cost': '5.50', 'qty': 75, 'category': self.category.id}
        response = self.client.post('/api/inventory-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Item created successfully')
        self.assertEqual(response.data['data']['item_no'], 'PVC-200')
        item = InventoryItem.objects.get(item_no='PVC-200')
        self.assertEqual(item.unit_cost, Decimal('5.50'))
        self.assertEqual(item.unit_weight, Decimal('0'))

    def test_create_duplicate_item_no_fails(self):
        TestDataFactory.create_inventory_item(item_no='DUP-1', category=self.category)
        data = {'item_no': 'DUP-1', 'qty': 1, 'category': self.category.id}
        response = self.client.post('/api/inventory-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('item_no', response.data['errors'])

    def test_create_with_unknown_category_fails(self):
        data = {'item_no': 'X-1', 'qty': 1, 'category': 99999}
        response = self.client.post('/api/inventory-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data['errors'])

    def test_create_requires_authentication(self):
        anonymous = AuthenticatedAPIClient()
        data = {'item_no': 'X-1', 'qty': 1, 'category': self.category.id}
        response = anonymous.post('/api/inventory-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_and_delete_item(self):
        item = TestDataFactory.create_inventory_item(category=self.category, qty=5)
        response = self.client.patch(f'/api/inventory-items/{item.id}/', {'qty': 12}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['qty'], 12)

        response = self.client.delete(f'/api/inventory-items/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(InventoryItem.objects.filter(id=item.id).exists())
        self.assertTrue(AuditLog.objects.filter(action='delete', model_name='InventoryItem').exists())


class InventoryBulkImportTests(TestCase):
    """Test the CSV bulk import endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category()

    def upload(self, content, name='items.csv'):
        csv_file = SimpleUploadedFile(name, content.encode('utf-8'), content_type='text/csv')
        return self.client.post('/api/inventory-items/bulk-import/', {'file': csv_file}, format='multipart')

    def test_import_valid_rows(self):
        content = (
            'item_no,desc,unit,unit_cost,unit_weight,qty,categoryId\n'
            f'PVC-200, PVC pipe ,m,5.50,1.2,75,{self.category.id}\n'
            f'TAP-SS,Water tap,pcs,,,10,{self.category.id}\n'
        )
        response = self.upload(content)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Items imported successfully')
        self.assertEqual(response.data['imported'], 2)
        self.assertEqual(response.data['failed'], 0)
        self.assertNotIn('errors', response.data)
        self.assertEqual(InventoryItem.objects.get(item_no='PVC-200').desc, 'PVC pipe')
        self.assertEqual(InventoryItem.objects.get(item_no='TAP-SS').unit_cost, Decimal('0'))
        self.assertTrue(AuditLog.objects.filter(action='bulk_import').exists())

    def test_row_errors_are_reported(self):
        TestDataFactory.create_inventory_item(item_no='EXISTING', category=self.category)
        content = (
            'item_no,unit,qty,categoryId\n'
            f'GOOD-1,pcs,5,{self.category.id}\n'
            f',pcs,5,{self.category.id}\n'
            'BAD-CAT,pcs,5,99999\n'
            f'EXISTING,pcs,5,{self.category.id}\n'
            f'GOOD-1,pcs,5,{self.category.id}\n'
            'NO-CAT,pcs,5,abc\n'
        )
        response = self.upload(content)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['imported'], 1)
        self.assertEqual(response.data['failed'], 5)
        errors = response.data['errors']
        self.assertIn('Row with item_no unknown: Missing required fields', errors)
        self.assertIn('Row with item_no BAD-CAT: Invalid category ID 99999', errors)
        self.assertIn('Row with item_no EXISTING: Item number already exists', errors)
        self.assertIn('Row with item_no GOOD-1: Item number already exists', errors)
        self.assertIn('Row with item_no NO-CAT: Missing required fields', errors)

    def test_nothing_imported_message(self):
        content = 'item_no,unit,qty,categoryId\nX-1,pcs,1,99999\n'
        response = self.upload(content)
        self.assertEqual(response.data['message'], 'No items were imported')
        self.assertEqual(response.data['imported'], 0)

    def test_missing_file(self):
        response = self.client.post('/api/inventory-items/bulk-import/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'No file uploaded')

    def test_non_csv_file_rejected(self):
        response = self.upload('item_no,unit,qty,categoryId\n', name='items.txt')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Only CSV files are allowed')

    @override_settings(INVENTORY_IMPORT_MAX_BYTES=10)
    def test_oversized_file_rejected(self):
        response = self.upload(f'item_no,unit,qty,categoryId\nA,pcs,1,{self.category.id}\n')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'File too large')

    def test_blank_file_rejected(self):
        response = self.upload('   \n  \n')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'The uploaded file is empty')

    def test_missing_columns_rejected(self):
        response = self.upload('item_no,desc\nA,thing\n')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Missing required columns: unit, qty, categoryId')

    def test_requires_authentication(self):
        anonymous = AuthenticatedAPIClient()
        csv_file = SimpleUploadedFile('items.csv', b'item_no,unit,qty,categoryId\n', content_type='text/csv')
        response = anonymous.post('/api/inventory-items/bulk-import/', {'file': csv_file}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class InventoryImporterTests(TestCase):
    """Test the CSV importer directly"""

    def setUp(self):
        self.category = TestDataFactory.create_category()

    def test_header_only_file_is_rejected(self):
        with self.assertRaises(InventoryImportError):
            read_rows('item_no,unit,qty,categoryId\n')

    def test_values_are_trimmed_and_defaults_applied(self):
        rows = read_rows(f' item_no , unit ,qty,categoryId\n  A-1  , kg ,abc, {self.category.id} \n')
        self.assertEqual(rows[0]['item_no'], 'A-1')
        created, errors = import_rows(rows)
        self.assertEqual(errors, [])
        self.assertEqual(created[0].unit, 'kg')
        self.assertEqual(created[0].qty, 0)

    def test_bytes_with_bom_are_decoded(self):
        content = f'\ufeffitem_no,unit,qty,categoryId\nB-1,pcs,3,{self.category.id}\n'.encode('utf-8')
        created, errors = import_rows(read_rows(content))
        self.assertEqual(len(created), 1)
        self.assertEqual(created[0].qty, 3)


class ImportInventoryCommandTests(TestCase):
    """Test the import_inventory management command"""

    def setUp(self):
        self.category = TestDataFactory.create_category()

    def test_command_imports_file(self):
        with tempfile.NamedTemporaryFile('w', suffix='.csv', delete=False) as f:
            f.write(f'item_no,unit,qty,categoryId\nCMD-1,pcs,4,{self.category.id}\n')
            path = f.name
        try:
            out = StringIO()
            call_command('import_inventory', path, stdout=out)
        finally:
            os.unlink(path)
        self.assertTrue(InventoryItem.objects.filter(item_no='CMD-1').exists())
        self.assertIn('Items Imported: 1', out.getvalue())

    def test_command_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('import_inventory', '/nonexistent/items.csv', stdout=StringIO())
