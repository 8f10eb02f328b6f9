"""
API Tests for Department endpoints.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from HR.work_structures.models import Department
from core.base.test_utils import create_role, create_user, setup_admin_permissions, setup_core_data
from core.revisions.models import Revision


class DepartmentAPITest(TestCase):
    """Test Department API endpoints."""

    @classmethod
    def setUpTestData(cls):
        setup_core_data()
        cls.user = create_user('admin@test.com', 'Admin User')
        setup_admin_permissions(cls.user)
        cls.root = Department.objects.create(code='ROOT', name_en='Head Office', name_ar='المكتب الرئيسي')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_list_departments(self):
        """Test GET /departments/"""
        response = self.client.get('/departments/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data['data']['results']
        self.assertEqual([d['code'] for d in results], ['ROOT'])

    def test_create_department(self):
        """Test POST /departments/"""
        response = self.client.post('/departments/', {
            'code': 'OPS',
            'name_en': 'Operations',
            'parent_id': self.root.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['parent_id'], self.root.id)
        self.assertEqual(response.data['parent_name_ar'], 'المكتب الرئيسي')

    def test_create_department_missing_code(self):
        response = self.client.post('/departments/', {'name_en': 'Nameless'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('code', response.data)

    def test_update_department(self):
        """Test PATCH /departments/<pk>/"""
        department = Department.objects.create(code='OPS', name_en='Ops', parent=self.root)
        response = self.client.patch(f'/departments/{department.id}/', {
            'name_en': 'Operations',
            'parent_id': None,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name_en'], 'Operations')
        self.assertIsNone(response.data['parent_id'])
        self.assertEqual(
            sorted(Revision.objects.for_entity('Department', department.id).values_list('field_name', flat=True)),
            ['name_en', 'parent'],
        )

    def test_get_missing_department(self):
        response = self.client.get('/departments/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_department(self):
        """Test DELETE /departments/<pk>/"""
        department = Department.objects.create(code='TMP', name_en='Temporary')
        response = self.client.delete(f'/departments/{department.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Department.objects.filter(pk=department.id).exists())

    def test_delete_department_with_children_is_refused(self):
        Department.objects.create(code='SUB', name_en='Sub', parent=self.root)
        response = self.client.delete(f'/departments/{self.root.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sub-department', response.data['detail'])

    def test_toggle_activity(self):
        """Test POST /departments/<pk>/toggle-activity/"""
        response = self.client.post(f'/departments/{self.root.id}/toggle-activity/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_active'])
        response = self.client.post(f'/departments/{self.root.id}/toggle-activity/')
        self.assertTrue(response.data['is_active'])
        self.assertEqual(
            Revision.objects.for_entity('Department', self.root.id).filter(field_name='is_active').count(), 2
        )

    def test_bulk_toggle_missing_id_is_all_or_nothing(self):
        other = Department.objects.create(code='OTHER', name_en='Other')
        response = self.client.post('/departments/bulk-toggle/', {
            'ids': [self.root.id, other.id, 999999], 'is_active': False,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Department.objects.filter(is_active=True).count(), 2)


class DepartmentPermissionTest(TestCase):
    """View-only users can read but every write is refused"""

    @classmethod
    def setUpTestData(cls):
        setup_core_data()
        role = create_role('Department Viewer', ['department-management:view'])
        cls.viewer = create_user('viewer@test.com', role=role)
        cls.department = Department.objects.create(code='OPS', name_en='Operations')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.viewer)

    def test_view_only_user(self):
        self.assertEqual(self.client.get('/departments/').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'/departments/{self.department.id}/').status_code, status.HTTP_200_OK)

        writes = [
            ('post', '/departments/', {'code': 'NEW', 'name_en': 'New'}, 'create'),
            ('patch', f'/departments/{self.department.id}/', {'name_en': 'X'}, 'update'),
            ('delete', f'/departments/{self.department.id}/', None, 'delete'),
            ('post', f'/departments/{self.department.id}/toggle-activity/', None, 'toggle-activity'),
            ('post', '/departments/bulk-delete/', {'ids': [self.department.id]}, 'delete'),
            ('post', '/departments/bulk-toggle/', {'ids': [self.department.id], 'is_active': False},
             'toggle-activity'),
        ]
        for method, url, body, action in writes:
            response = getattr(self.client, method)(url, body, format='json')
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, url)
            self.assertEqual(
                response.data['required_permission']['id'], f'department-management:{action}', url
            )

        self.department.refresh_from_db()
        self.assertEqual(self.department.name_en, 'Operations')
        self.assertTrue(self.department.is_active)
        self.assertFalse(Revision.objects.filter(entity_type='Department').exists())

    def test_bulk_delete_of_five_without_delete_permission(self):
        ids = [
            Department.objects.create(code=f'D{n}', name_en=f'Department {n}').id
            for n in range(5)
        ]
        response = self.client.post('/departments/bulk-delete/', {'ids': ids}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Department.objects.filter(pk__in=ids).count(), 5)
        self.assertFalse(Revision.objects.filter(entity_type='Department', operation='delete').exists())
