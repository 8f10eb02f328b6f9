"""
Tests for the request gate and the permission catalog it is built from.
"""
from django.test import SimpleTestCase

from core.access_control.actor import Actor
from core.access_control.catalog import (
    ALL_PERMISSIONS,
    Action,
    Module,
    PermissionKey,
    all_permission_ids,
    grouped_catalog,
    permission_label,
)
from core.access_control.evaluator import PermissionEvaluator
from core.access_control.exceptions import PermissionDeniedError
from core.access_control.gate import (
    GATE_RULES,
    RequestGate,
    normalize_path,
    resolve_permission,
)


class _Holder:
    def __init__(self, actor=None):
        self.actor = actor


def gate_for(permissions=(), **payload):
    payload.setdefault('id', 1)
    payload['permissions'] = list(permissions)
    return RequestGate(PermissionEvaluator(_Holder(Actor.from_payload(payload))))


class CatalogTests(SimpleTestCase):

    def test_ids_are_unique_and_derived_from_pair(self):
        ids = all_permission_ids()
        self.assertEqual(len(ids), len(set(ids)))
        for key in ALL_PERMISSIONS:
            self.assertEqual(key.id, f"{key.module.value}:{key.action.value}")
            self.assertEqual(PermissionKey.parse(key.id), key)

    def test_parse_rejects_malformed_ids(self):
        for raw in ('', 'department-management', 'a:b:c', None, 42, 'permit-management:toggle-activity'):
            self.assertIsNone(PermissionKey.parse(raw), raw)

    def test_resource_names_resolve_to_modules(self):
        self.assertEqual(
            PermissionKey.coerce('roles', 'delete'),
            PermissionKey(Module.ROLE_MANAGEMENT, Action.DELETE),
        )
        self.assertEqual(PermissionKey.coerce('job-titles', 'view').module, Module.JOB_TITLE_MANAGEMENT)
        self.assertIsNone(PermissionKey.coerce('permits', 'toggle-activity'))
        self.assertIsNone(PermissionKey.coerce('nonexistent-module', 'delete'))
        # The wire form only accepts the module slug
        self.assertIsNone(PermissionKey.parse('roles:delete'))

    def test_grouped_catalog_lists_modules_in_order(self):
        groups = grouped_catalog()
        self.assertEqual(list(groups)[0], 'department-management')
        self.assertEqual(list(groups)[-1], 'permit-management')
        department = groups['department-management']
        self.assertEqual(department['module_info']['name_en'], 'Department Management')
        self.assertEqual(
            [p['action'] for p in department['permissions']],
            ['view', 'create', 'update', 'delete', 'toggle-activity', 'view-history'],
        )

    def test_permission_label_is_bilingual(self):
        key = PermissionKey(Module.ROLE_MANAGEMENT, Action.DELETE)
        self.assertEqual(permission_label(key), 'Role Management - Delete')
        self.assertEqual(permission_label(key, 'ar'), 'إدارة الأدوار - حذف')


class ResolvePermissionTests(SimpleTestCase):
    """Method + path -> (module, action)"""

    def assertResolves(self, method, path, module, action):
        self.assertEqual(resolve_permission(method, path), PermissionKey(module, action), f"{method} {path}")

    def test_collection_and_item_routes(self):
        self.assertResolves('GET', '/departments/', Module.DEPARTMENT_MANAGEMENT, Action.VIEW)
        self.assertResolves('POST', '/departments/', Module.DEPARTMENT_MANAGEMENT, Action.CREATE)
        self.assertResolves('GET', '/users/5/', Module.USER_MANAGEMENT, Action.VIEW)
        self.assertResolves('PUT', '/roles/5/', Module.ROLE_MANAGEMENT, Action.UPDATE)
        self.assertResolves('PATCH', '/job-titles/5/', Module.JOB_TITLE_MANAGEMENT, Action.UPDATE)
        self.assertResolves('DELETE', '/users/5/', Module.USER_MANAGEMENT, Action.DELETE)

    def test_fixed_segments_win_over_item_routes(self):
        self.assertResolves('GET', '/departments/history/', Module.DEPARTMENT_MANAGEMENT, Action.VIEW_HISTORY)
        self.assertResolves('GET', '/departments/history/entity/42/',
                            Module.DEPARTMENT_MANAGEMENT, Action.VIEW_HISTORY)
        self.assertResolves('POST', '/roles/bulk-delete/', Module.ROLE_MANAGEMENT, Action.DELETE)
        self.assertResolves('POST', '/roles/bulk-toggle/', Module.ROLE_MANAGEMENT, Action.TOGGLE_ACTIVITY)
        self.assertResolves('POST', '/users/3/toggle-activity/', Module.USER_MANAGEMENT, Action.TOGGLE_ACTIVITY)

    def test_catalog_endpoint(self):
        self.assertResolves('GET', '/permissions/groups/', Module.ROLE_MANAGEMENT, Action.VIEW)

    def test_paths_are_normalized(self):
        self.assertResolves('get', 'http://host/departments/42?expand=1', Module.DEPARTMENT_MANAGEMENT, Action.VIEW)
        self.assertResolves('HEAD', '/departments//42', Module.DEPARTMENT_MANAGEMENT, Action.VIEW)
        self.assertEqual(normalize_path('https://x/api/users/1', '/api'), '/users/1/')
        self.assertEqual(normalize_path('/apiary/', '/api'), '/apiary/')

    def test_unsupported_actions_have_no_rule(self):
        self.assertIsNone(resolve_permission('POST', '/permits/3/toggle-activity/'))
        self.assertIsNone(resolve_permission('POST', '/permits/bulk-toggle/'))
        self.assertIsNone(resolve_permission('POST', '/invoices/'))
        self.assertIsNone(resolve_permission('DELETE', '/departments/'))

    def test_every_rule_maps_to_catalog_permission(self):
        for rule in GATE_RULES:
            self.assertIn(rule.permission, ALL_PERMISSIONS, rule.template)


class RequestGateTests(SimpleTestCase):

    def test_view_only_actor_cannot_create(self):
        gate = gate_for(['department-management:view'])
        self.assertEqual(
            gate.authorize('GET', '/departments/'),
            PermissionKey(Module.DEPARTMENT_MANAGEMENT, Action.VIEW),
        )
        with self.assertRaises(PermissionDeniedError) as ctx:
            gate.authorize('POST', '/departments/')
        error = ctx.exception
        self.assertEqual(error.method, 'POST')
        self.assertEqual(error.path, '/departments/')
        self.assertEqual(error.permission, PermissionKey(Module.DEPARTMENT_MANAGEMENT, Action.CREATE))
        self.assertIn('department-management:create', str(error))

    def test_bulk_calls_need_single_entity_permission(self):
        gate = gate_for(['user-management:delete'])
        self.assertTrue(gate.is_allowed('POST', '/users/bulk-delete/'))
        self.assertFalse(gate.is_allowed('POST', '/users/bulk-toggle/'))

    def test_unmapped_path_is_blocked_even_for_full_access(self):
        gate = gate_for(has_full_access=True)
        with self.assertRaises(PermissionDeniedError) as ctx:
            gate.authorize('POST', '/reports/run/')
        self.assertIsNone(ctx.exception.permission)

    def test_public_paths_need_no_actor(self):
        gate = RequestGate(PermissionEvaluator(_Holder(None)))
        self.assertIsNone(gate.authorize('POST', '/auth/login/'))
        self.assertIsNone(gate.authorize('GET', '/auth/me'))
        self.assertFalse(gate.is_allowed('GET', '/departments/'))

    def test_full_access_passes_every_rule(self):
        gate = gate_for(has_full_access=True)
        for rule in GATE_RULES:
            path = rule.template.replace('{id}', '9')
            self.assertEqual(gate.authorize(rule.method, path), rule.permission)

    def test_base_path_is_stripped(self):
        gate = RequestGate(
            PermissionEvaluator(_Holder(Actor.from_payload({'id': 1, 'permissions': ['role-management:view']}))),
            base_path='/api',
        )
        self.assertTrue(gate.is_allowed('GET', 'https://console.example.com/api/roles/'))
        self.assertTrue(gate.is_public('/api/auth/login/'))
