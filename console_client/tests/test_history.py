"""
Tests for RevisionReader.
"""
import unittest

import requests

from console_client.history import HistoryPage, RevisionReader, resource_for
from console_client.session import SessionContext
from console_client.tests.fixtures import RecordingAdapter, envelope, make_actor, make_client
from core.access_control.exceptions import (
    ForbiddenError,
    HistoryUnavailableError,
    PermissionDeniedError,
)


def revision_payload(pk, operation='edit', field_name='name_en', previous=None, current=None,
                     date='2024-03-05T14:07:00Z', modified_by=None):
    return {
        'id': pk,
        'entity_type': 'Department',
        'entity_id': '42',
        'operation': operation,
        'field_name': field_name,
        'previous_value': previous,
        'current_value': current,
        'modified_by': modified_by,
        'modification_date': date,
    }


class RevisionReaderTests(unittest.TestCase):

    def setUp(self):
        self.adapter = RecordingAdapter()
        self.session = SessionContext()
        self.session.establish(make_actor(['department-management:view-history']), 'token')
        self.client = make_client(self.adapter, self.session)
        self.notified = []
        self.reader = RevisionReader(self.client, notifier=self.notified.append)

    def test_entity_history_is_sorted_oldest_first(self):
        self.adapter.queue(200, envelope([
            revision_payload(3, previous='Ops', current='Operations', date='2024-03-05T14:07:00Z'),
            revision_payload(1, operation='create', field_name=None, current={'code': 'OPS'},
                             date='2024-03-01T09:00:00Z'),
            revision_payload(2, previous='O', current='Ops', date='2024-03-05T14:07:00Z'),
        ]))
        history = self.reader.get_entity_history('Department', 42)

        self.assertEqual([r.id for r in history], [1, 2, 3])
        self.assertEqual(self.adapter.requests[0].url, 'http://testserver/departments/history/entity/42/')
        self.assertEqual(history[0].entity_id, '42')
        self.assertEqual(self.notified, [])

    def test_empty_history(self):
        self.adapter.queue(200, envelope([]))
        self.assertEqual(self.reader.get_entity_history('Department', 42), [])
        self.assertEqual(self.notified, [])

    def test_server_error_is_reported_and_yields_empty(self):
        self.adapter.queue(500, envelope(message='Internal error', status='error'))
        self.assertEqual(self.reader.get_entity_history('Department', 42), [])

        self.assertEqual(len(self.notified), 1)
        error = self.notified[0]
        self.assertIsInstance(error, HistoryUnavailableError)
        self.assertEqual((error.entity_type, error.entity_id), ('Department', 42))
        self.assertTrue(self.session.is_authenticated)

    def test_transport_error_is_reported(self):
        self.adapter.queue(200, requests.Timeout('timed out'))
        self.assertEqual(self.reader.get_entity_history('Department', 42), [])
        self.assertIsInstance(self.notified[0].cause, requests.Timeout)

    def test_malformed_payload_is_reported(self):
        self.adapter.queue(200, envelope([{'id': 1}]))
        self.assertEqual(self.reader.get_entity_history('Department', 42), [])
        self.assertEqual(len(self.notified), 1)

    def test_forbidden_propagates(self):
        self.adapter.queue(403, envelope({'error': 'Permission denied'}, message='denied', status='error'))
        with self.assertRaises(ForbiddenError):
            self.reader.get_entity_history('Department', 42)
        self.assertEqual(self.notified, [])

    def test_missing_permission_is_not_swallowed(self):
        with self.assertRaises(PermissionDeniedError):
            self.reader.get_entity_history('User', 7)
        self.assertEqual(self.adapter.requests, [])

    def test_model_history_page(self):
        self.adapter.queue(200, envelope({
            'count': 3,
            'next': 'http://testserver/departments/history/?page=2',
            'previous': None,
            'results': [revision_payload(1), revision_payload(2)],
        }))
        page = self.reader.get_model_history('Department', operation='edit', field_name=None, page_size=2)

        self.assertEqual(page.count, 3)
        self.assertEqual([r.id for r in page.results], [1, 2])
        self.assertIsNotNone(page.next)
        self.assertEqual(
            self.adapter.requests[0].url,
            'http://testserver/departments/history/?operation=edit&page_size=2',
        )

    def test_model_history_failure(self):
        self.adapter.queue(502, None)
        self.assertEqual(self.reader.get_model_history('Department'), HistoryPage())
        self.assertIsNone(self.notified[0].entity_id)

    def test_display_rows(self):
        self.adapter.queue(200, envelope([
            revision_payload(1, operation='create', field_name=None, current={'code': 'OPS'}),
            revision_payload(2, previous='Ops', current='Operations',
                             modified_by={'id': 1, 'name_en': 'Admin', 'name_ar': 'المسؤول'},
                             date='2024-03-06T08:30:00Z'),
        ]))
        rows = self.reader.get_entity_history_rows('Department', 42, locale='ar')
        self.assertEqual(rows[0]['current'], 'البيانات الأولية')
        self.assertEqual(rows[0]['modified_by'], 'النظام')
        self.assertEqual(rows[1]['field'], 'الاسم (إنجليزي)')
        self.assertEqual((rows[1]['previous'], rows[1]['current']), ('Ops', 'Operations'))
        self.assertEqual(rows[1]['modified_by'], 'المسؤول')
        self.assertEqual(rows[1]['date'], '06/03/2024 08:30')

    def test_unknown_entity_type(self):
        with self.assertRaises(ValueError):
            resource_for('Invoice')
