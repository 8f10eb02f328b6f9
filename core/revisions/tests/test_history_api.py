"""
API Tests for the history endpoints.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from HR.work_structures.dtos import DepartmentCreateDTO, DepartmentUpdateDTO
from HR.work_structures.services import DepartmentService
from core.base.test_utils import create_role, create_user, setup_admin_permissions, setup_core_data
from core.revisions.models import Revision


class HistoryAPITest(TestCase):
    """Test GET /<resource>/history/ and /<resource>/history/entity/<id>/"""

    @classmethod
    def setUpTestData(cls):
        setup_core_data()
        cls.admin = create_user('admin@test.com', 'Admin User')
        setup_admin_permissions(cls.admin)

        cls.ops = DepartmentService.create(cls.admin, DepartmentCreateDTO(code='OPS', name_en='Ops'))
        DepartmentService.update(cls.admin, DepartmentUpdateDTO(department_id=cls.ops.id, name_en='Operations'))
        cls.fin = DepartmentService.create(cls.admin, DepartmentCreateDTO(code='FIN', name_en='Finance'))
        DepartmentService.toggle_activity(cls.admin, cls.fin.id)

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_entity_history(self):
        response = self.client.get(f'/departments/history/entity/{self.ops.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['operation'] for row in response.data], ['create', 'edit'])
        edit = response.data[1]
        self.assertEqual(edit['entity_type'], 'Department')
        self.assertEqual(edit['entity_id'], str(self.ops.id))
        self.assertEqual(edit['field_name'], 'name_en')
        self.assertEqual(edit['previous_value'], 'Ops')
        self.assertEqual(edit['current_value'], 'Operations')
        self.assertEqual(edit['modified_by']['email'], 'admin@test.com')

    def test_entity_without_history_returns_empty_list(self):
        response = self.client.get('/departments/history/entity/999999/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_history_is_scoped_to_entity_type(self):
        response = self.client.get(f'/roles/history/entity/{self.ops.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_model_history_paginated(self):
        response = self.client.get('/departments/history/', {'page_size': 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['count'], 4)
        self.assertEqual(len(data['results']), 2)
        self.assertIsNotNone(data['next'])

    def test_model_history_filters(self):
        response = self.client.get('/departments/history/', {'operation': 'edit'})
        results = response.data['data']['results']
        self.assertEqual([r['field_name'] for r in results], ['name_en', 'is_active'])

        response = self.client.get('/departments/history/', {'field_name': 'is_active'})
        results = response.data['data']['results']
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0]['entity_id'], str(self.fin.id))
        self.assertEqual((results[0]['previous_value'], results[0]['current_value']), (True, False))

        response = self.client.get('/departments/history/', {'entity_id': self.ops.id})
        self.assertEqual(response.data['data']['count'], 2)

        response = self.client.get('/departments/history/', {'modified_by': self.admin.id})
        self.assertEqual(response.data['data']['count'], 4)

    def test_model_history_date_filters(self):
        response = self.client.get('/departments/history/', {'date_from': '2999-01-01'})
        self.assertEqual(response.data['data']['count'], 0)

        response = self.client.get('/departments/history/', {'date_to': '2999-01-01'})
        self.assertEqual(response.data['data']['count'], 4)

    def test_invalid_filters(self):
        response = self.client.get('/departments/history/', {'operation': 'rename'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/departments/history/', {'date_from': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_history_requires_view_history(self):
        viewer = create_user('viewer@test.com', role=create_role('Viewer', ['department-management:view']))
        self.client.force_authenticate(user=viewer)

        self.assertEqual(self.client.get('/departments/').status_code, status.HTTP_200_OK)
        response = self.client.get(f'/departments/history/entity/{self.ops.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['required_permission']['id'], 'department-management:view-history')
        response = self.client.get('/departments/history/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_history_reads_do_not_write(self):
        before = Revision.objects.count()
        self.client.get(f'/departments/history/entity/{self.ops.id}/')
        self.client.get('/departments/history/')
        self.assertEqual(Revision.objects.count(), before)
