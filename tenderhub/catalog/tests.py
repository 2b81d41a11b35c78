"""
Test suite for the catalog module
Tests: category CRUD, code uniqueness, parent validation, delete guards
"""
from django.test import TestCase
from rest_framework import status
from tenderhub.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from tenderhub.catalog.models import Category, InventoryCategory


class CategoryModelTests(TestCase):
    """Test Category model methods"""

    def test_str_with_code(self):
        category = TestDataFactory.create_category(name='Heavy Equipment', code='HEQ', cat_type='EQUIPMENT')
        self.assertEqual(str(category), 'Heavy Equipment (HEQ)')

    def test_has_dependents(self):
        parent = TestDataFactory.create_category()
        self.assertFalse(parent.has_dependents())
        TestDataFactory.create_category(parent=parent)
        self.assertTrue(parent.has_dependents())

    def test_inventory_item_counts_as_dependent(self):
        category = TestDataFactory.create_category()
        TestDataFactory.create_inventory_item(category=category)
        self.assertTrue(category.has_dependents())


class CategoryAPITests(TestCase):
    """Test Category API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_categories_is_public(self):
        TestDataFactory.create_category(name='Building Materials', code='BMA')
        anonymous = AuthenticatedAPIClient()
        response = anonymous.get('/api/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['code'], 'BMA')

    def test_create_requires_authentication(self):
        anonymous = AuthenticatedAPIClient()
        response = anonymous.post('/api/categories/', {'name': 'X', 'cat_type': 'SERVICES'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_category(self):
        data = {'name': 'Logistics Services', 'code': 'LSV', 'cat_type': 'SERVICES'}
        response = self.client.post('/api/categories/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'LSV')
        self.assertEqual(response.data['children'], [])

    def test_create_with_duplicate_code_fails(self):
        TestDataFactory.create_category(code='HEQ')
        data = {'name': 'Another', 'code': 'HEQ', 'cat_type': 'EQUIPMENT'}
        response = self.client.post('/api/categories/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('code', response.data)

    def test_blank_codes_do_not_collide(self):
        for name in ('First', 'Second'):
            response = self.client.post('/api/categories/', {'name': name, 'code': '', 'cat_type': 'MATERIALS'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Category.objects.filter(code__isnull=True).count(), 2)

    def test_create_with_invalid_type_fails(self):
        response = self.client.post('/api/categories/', {'name': 'Bad', 'cat_type': 'GOODS'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cat_type', response.data)

    def test_detail_embeds_children(self):
        parent = TestDataFactory.create_category(name='Equipment')
        TestDataFactory.create_category(name='Cranes', parent=parent)
        response = self.client.get(f'/api/categories/{parent.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['children']), 1)
        self.assertEqual(response.data['children'][0]['name'], 'Cranes')

    def test_filter_root_categories(self):
        parent = TestDataFactory.create_category()
        TestDataFactory.create_category(parent=parent)
        response = self.client.get('/api/categories/?parent=root')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['id'], parent.id)

    def test_category_cannot_be_its_own_parent(self):
        category = TestDataFactory.create_category()
        response = self.client.patch(f'/api/categories/{category.id}/', {'parent': category.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent', response.data)

    def test_category_cannot_move_under_its_child(self):
        parent = TestDataFactory.create_category()
        child = TestDataFactory.create_category(parent=parent)
        response = self.client.patch(f'/api/categories/{parent.id}/', {'parent': child.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_with_unknown_parent_fails(self):
        category = TestDataFactory.create_category()
        response = self.client.patch(f'/api/categories/{category.id}/', {'parent': 99999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_to_duplicate_code_fails(self):
        TestDataFactory.create_category(code='AAA')
        category = TestDataFactory.create_category(code='BBB')
        response = self.client.patch(f'/api/categories/{category.id}/', {'code': 'AAA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_category(self):
        category = TestDataFactory.create_category()
        response = self.client.delete(f'/api/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Category.objects.filter(id=category.id).exists())

    def test_delete_category_with_children_fails(self):
        parent = TestDataFactory.create_category()
        TestDataFactory.create_category(parent=parent)
        response = self.client.delete(f'/api/categories/{parent.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot delete category with subcategories')

    def test_delete_category_with_tender_items_fails(self):
        tender = TestDataFactory.create_tender()
        TestDataFactory.create_tender_item(tender)
        response = self.client.delete(f'/api/categories/{tender.category.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Category.objects.filter(id=tender.category.id).exists())

    def test_get_missing_category(self):
        response = self.client.get('/api/categories/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class InventoryCategoryAPITests(TestCase):
    """Test InventoryCategory API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_list(self):
        response = self.client.post('/api/inventory-categories/', {'name': 'Plumbing Supplies', 'code': 'PLUMB'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/inventory-categories/')
        self.assertEqual(len(response.data), 1)

    def test_code_is_required(self):
        response = self.client.post('/api/inventory-categories/', {'name': 'No code'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self):
        category = InventoryCategory.objects.create(name='Tools', code='TOOLS')
        response = self.client.patch(f'/api/inventory-categories/{category.id}/', {'name': 'Tools & Hardware'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Tools & Hardware')
        response = self.client.delete(f'/api/inventory-categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
