"""
Revision field rendering.

Pure functions shared by the API serializers and ``console_client.history``.
No Django imports here.
"""
import datetime
import json

from dateutil import parser as date_parser

from core.base.text import localized_text, normalize_locale

NOT_AVAILABLE = {'en': 'N/A', 'ar': 'غير متوفر'}
SYSTEM_ACTOR = {'en': 'System', 'ar': 'النظام'}
PASSWORD_MASK = '••••••••'

BOOLEAN_LABELS = {
    'is_active': {'en': ('Active', 'Inactive'), 'ar': ('نشط', 'غير نشط')},
    'is_deleted': {'en': ('Deleted', 'Not Deleted'), 'ar': ('محذوف', 'غير محذوف')},
    'has_full_access': {'en': ('Yes', 'No'), 'ar': ('نعم', 'لا')},
    'is_super_admin': {'en': ('Yes', 'No'), 'ar': ('نعم', 'لا')},
}

DATE_FIELDS = ('created_at', 'updated_at', 'modification_date')

TEXT_FIELDS = (
    'name_en', 'name_ar', 'email', 'phone', 'username', 'code',
    'description', 'description_en', 'description_ar',
)

REFERENCE_FIELDS = ('role', 'department', 'job_title', 'parent')

FIELD_LABELS = {
    'name_en': ('Name (English)', 'الاسم (إنجليزي)'),
    'name_ar': ('Name (Arabic)', 'الاسم (عربي)'),
    'code': ('Code', 'الرمز'),
    'email': ('Email', 'البريد الإلكتروني'),
    'phone': ('Phone', 'الهاتف'),
    'username': ('Username', 'اسم المستخدم'),
    'password': ('Password', 'كلمة المرور'),
    'description': ('Description', 'الوصف'),
    'description_en': ('Description (English)', 'الوصف (إنجليزي)'),
    'description_ar': ('Description (Arabic)', 'الوصف (عربي)'),
    'is_active': ('Status', 'الحالة'),
    'is_deleted': ('Deleted', 'محذوف'),
    'has_full_access': ('Full Access', 'وصول كامل'),
    'is_super_admin': ('Super Admin', 'مسؤول أعلى'),
    'role': ('Role', 'الدور'),
    'department': ('Department', 'القسم'),
    'job_title': ('Job Title', 'المسمى الوظيفي'),
    'parent': ('Parent Department', 'القسم الرئيسي'),
    'permissions': ('Permissions', 'الصلاحيات'),
    'direct_permissions': ('Direct Permissions', 'الصلاحيات المباشرة'),
    'created_at': ('Created At', 'تاريخ الإنشاء'),
    'updated_at': ('Updated At', 'تاريخ التحديث'),
}

OPERATION_LABELS = {
    'create': ('Created', 'إنشاء'),
    'edit': ('Edited', 'تعديل'),
    'delete': ('Deleted', 'حذف'),
}

# Placeholder cells for rows that carry a whole snapshot instead of one field
SNAPSHOT_CELLS = {
    'create': {'en': ('-', 'Initial Data'), 'ar': ('-', 'البيانات الأولية')},
    'delete': {'en': ('Existed', 'Deleted Status'), 'ar': ('موجود', 'حالة الحذف')},
}

_DATE_FORMATS = {
    'en': '%b %d, %Y %I:%M %p',
    'ar': '%d/%m/%Y %H:%M',
}


def _pick(table, locale):
    en, ar = table
    return ar if normalize_locale(locale) == 'ar' else en


def field_display_name(field_name, locale='en'):
    """Human label for a field; unknown fields become 'Title Case'."""
    if field_name in FIELD_LABELS:
        return _pick(FIELD_LABELS[field_name], locale)
    return str(field_name or '').replace('_', ' ').title()


def operation_display_name(operation, locale='en'):
    if operation in OPERATION_LABELS:
        return _pick(OPERATION_LABELS[operation], locale)
    return str(operation)


def format_datetime(value, locale='en'):
    if isinstance(value, datetime.datetime):
        moment = value
    elif isinstance(value, datetime.date):
        moment = datetime.datetime(value.year, value.month, value.day)
    else:
        try:
            moment = date_parser.isoparse(str(value))
        except (ValueError, OverflowError):
            return str(value)
    return moment.strftime(_DATE_FORMATS[normalize_locale(locale)])


def _format_reference(value, locale):
    if isinstance(value, dict):
        name = localized_text(value.get('name_en'), value.get('name_ar'), locale)
        if name:
            return name
        if value.get('id') is not None:
            return str(value['id'])
        return NOT_AVAILABLE[normalize_locale(locale)]
    return str(value)


def _format_permissions(value, locale):
    if not value:
        return 'لا توجد صلاحيات' if normalize_locale(locale) == 'ar' else 'No permissions'
    if isinstance(value, (list, tuple)):
        return ', '.join(str(item) for item in value)
    return str(value)


def _format_boolean(field_name, value, locale):
    true_label, false_label = BOOLEAN_LABELS[field_name][normalize_locale(locale)]
    return true_label if value else false_label


def _format_default(value):
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    return str(value)


def format_field_value(field_name, value, locale='en'):
    """
    Render one revision value for display.

    The same table applies to every entity type; fields not listed fall back
    to JSON (for dicts and lists) or ``str``.
    """
    if field_name == 'password':
        return PASSWORD_MASK
    if field_name in ('permissions', 'direct_permissions'):
        return _format_permissions(value, locale)
    if value is None:
        return NOT_AVAILABLE[normalize_locale(locale)]
    if field_name in BOOLEAN_LABELS:
        return _format_boolean(field_name, value, locale)
    if field_name in DATE_FIELDS:
        return format_datetime(value, locale)
    if field_name in REFERENCE_FIELDS:
        return _format_reference(value, locale)
    if field_name in TEXT_FIELDS:
        return str(value) if value != '' else NOT_AVAILABLE[normalize_locale(locale)]
    return _format_default(value)


def modified_by_display(modified_by, locale='en'):
    """Actor reference ({id, name_en, name_ar, email}) or null => 'System'."""
    if not modified_by:
        return SYSTEM_ACTOR[normalize_locale(locale)]
    if isinstance(modified_by, dict):
        return (
            localized_text(modified_by.get('name_en'), modified_by.get('name_ar'), locale)
            or modified_by.get('email')
            or str(modified_by.get('id'))
        )
    return str(modified_by)


def format_revision_row(revision, locale='en'):
    """
    Display row for one revision.

    ``revision`` is anything exposing ``operation``, ``field_name``,
    ``previous_value``, ``current_value``, ``modified_by`` and
    ``modification_date`` attributes.
    """
    operation = revision.operation
    language = normalize_locale(locale)
    if operation in SNAPSHOT_CELLS:
        previous, current = SNAPSHOT_CELLS[operation][language]
        field = '-'
    else:
        previous = format_field_value(revision.field_name, revision.previous_value, language)
        current = format_field_value(revision.field_name, revision.current_value, language)
        field = field_display_name(revision.field_name, language)
    return {
        'operation': operation_display_name(operation, language),
        'field': field,
        'previous': previous,
        'current': current,
        'modified_by': modified_by_display(revision.modified_by, language),
        'date': format_datetime(revision.modification_date, language),
    }
