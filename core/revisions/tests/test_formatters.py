"""
Tests for revision display formatting.
"""
import datetime
from types import SimpleNamespace

from django.test import SimpleTestCase

from core.revisions.formatters import (
    PASSWORD_MASK,
    field_display_name,
    format_datetime,
    format_field_value,
    format_revision_row,
    modified_by_display,
    operation_display_name,
)


def revision(**values):
    values.setdefault('operation', 'edit')
    values.setdefault('field_name', 'name_en')
    values.setdefault('previous_value', None)
    values.setdefault('current_value', None)
    values.setdefault('modified_by', None)
    values.setdefault('modification_date', datetime.datetime(2024, 3, 5, 14, 7))
    return SimpleNamespace(**values)


class FieldValueTests(SimpleTestCase):

    def test_password_is_always_masked(self):
        self.assertEqual(format_field_value('password', 'hunter2'), PASSWORD_MASK)
        self.assertEqual(format_field_value('password', None), PASSWORD_MASK)

    def test_missing_values(self):
        self.assertEqual(format_field_value('name_en', None), 'N/A')
        self.assertEqual(format_field_value('name_en', ''), 'N/A')
        self.assertEqual(format_field_value('name_en', None, 'ar'), 'غير متوفر')

    def test_booleans_use_field_labels(self):
        self.assertEqual(format_field_value('is_active', True), 'Active')
        self.assertEqual(format_field_value('is_active', False), 'Inactive')
        self.assertEqual(format_field_value('is_active', False, 'ar'), 'غير نشط')
        self.assertEqual(format_field_value('has_full_access', True), 'Yes')

    def test_permission_lists(self):
        self.assertEqual(
            format_field_value('permissions', ['role-management:view', 'user-management:view']),
            'role-management:view, user-management:view',
        )
        self.assertEqual(format_field_value('direct_permissions', []), 'No permissions')
        self.assertEqual(format_field_value('permissions', None, 'ar'), 'لا توجد صلاحيات')

    def test_references_show_localized_name(self):
        value = {'id': 3, 'name_en': 'Operations', 'name_ar': 'العمليات'}
        self.assertEqual(format_field_value('parent', value), 'Operations')
        self.assertEqual(format_field_value('parent', value, 'ar'), 'العمليات')
        self.assertEqual(format_field_value('role', {'id': 9}), '9')

    def test_dates(self):
        self.assertEqual(format_field_value('created_at', '2024-03-05T14:07:00Z'), 'Mar 05, 2024 02:07 PM')
        self.assertEqual(format_datetime(datetime.date(2024, 3, 5), 'ar'), '05/03/2024 00:00')
        self.assertEqual(format_datetime('not a date'), 'not a date')

    def test_unknown_fields_fall_back(self):
        self.assertEqual(format_field_value('settings', {'b': 1, 'a': 2}), '{"a": 2, "b": 1}')
        self.assertEqual(format_field_value('sort_order', 4), '4')


class LabelTests(SimpleTestCase):

    def test_field_names(self):
        self.assertEqual(field_display_name('name_en'), 'Name (English)')
        self.assertEqual(field_display_name('job_title', 'ar'), 'المسمى الوظيفي')
        self.assertEqual(field_display_name('cost_center'), 'Cost Center')

    def test_operations(self):
        self.assertEqual(operation_display_name('create'), 'Created')
        self.assertEqual(operation_display_name('delete', 'ar-EG'), 'حذف')

    def test_modified_by(self):
        self.assertEqual(modified_by_display(None), 'System')
        self.assertEqual(modified_by_display(None, 'ar'), 'النظام')
        self.assertEqual(modified_by_display({'id': 1, 'name_en': 'Admin', 'email': 'a@test.com'}), 'Admin')
        self.assertEqual(modified_by_display({'id': 1, 'email': 'a@test.com'}), 'a@test.com')


class RevisionRowTests(SimpleTestCase):

    def test_edit_row(self):
        row = format_revision_row(revision(previous_value='Ops', current_value='Operations',
                                           modified_by={'id': 1, 'name_en': 'Admin'}))
        self.assertEqual(row, {
            'operation': 'Edited',
            'field': 'Name (English)',
            'previous': 'Ops',
            'current': 'Operations',
            'modified_by': 'Admin',
            'date': 'Mar 05, 2024 02:07 PM',
        })

    def test_create_and_delete_rows_use_snapshot_cells(self):
        created = format_revision_row(revision(operation='create', field_name=None,
                                               current_value={'code': 'OPS'}))
        self.assertEqual((created['field'], created['previous'], created['current']),
                         ('-', '-', 'Initial Data'))

        deleted = format_revision_row(revision(operation='delete', field_name=None,
                                               previous_value={'code': 'OPS'}), 'ar')
        self.assertEqual(deleted['operation'], 'حذف')
        self.assertEqual((deleted['previous'], deleted['current']), ('موجود', 'حالة الحذف'))
        self.assertEqual(deleted['modified_by'], 'النظام')

    def test_password_row_never_shows_values(self):
        row = format_revision_row(revision(field_name='password'))
        self.assertEqual(row['previous'], PASSWORD_MASK)
        self.assertEqual(row['current'], PASSWORD_MASK)
