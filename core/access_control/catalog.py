"""
Permission Catalog
==================

Defines every permission that exists in the console:
- 6 actions: view, create, update, delete, toggle-activity, view-history
- 5 modules: department, job title, user, role and permit management
- 1 system role (super-admin) seeded by ``init_core_data``

A permission is the pair ``(Module, Action)``. The ``"<module>:<action>"``
string is only the wire format, produced by ``PermissionKey.id`` and parsed by
``PermissionKey.parse``.

This module has no Django dependency; the API client imports it directly.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


# ============================================================================
# ACTIONS
# ============================================================================

class Action(str, Enum):
    """Action identifiers."""
    VIEW = 'view'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    TOGGLE_ACTIVITY = 'toggle-activity'
    VIEW_HISTORY = 'view-history'

    def __str__(self):
        return self.value


ACTION_LABELS = {
    Action.VIEW: {'en': 'View', 'ar': 'عرض'},
    Action.CREATE: {'en': 'Create', 'ar': 'إنشاء'},
    Action.UPDATE: {'en': 'Update', 'ar': 'تعديل'},
    Action.DELETE: {'en': 'Delete', 'ar': 'حذف'},
    Action.TOGGLE_ACTIVITY: {'en': 'Toggle Status', 'ar': 'تغيير الحالة'},
    Action.VIEW_HISTORY: {'en': 'History', 'ar': 'السجل'},
}


# ============================================================================
# MODULES
# ============================================================================

class Module(str, Enum):
    """Module identifiers (kebab-case slugs)."""
    DEPARTMENT_MANAGEMENT = 'department-management'
    JOB_TITLE_MANAGEMENT = 'job-title-management'
    USER_MANAGEMENT = 'user-management'
    ROLE_MANAGEMENT = 'role-management'
    PERMIT_MANAGEMENT = 'permit-management'

    def __str__(self):
        return self.value


STANDARD_ACTIONS = (
    Action.VIEW,
    Action.CREATE,
    Action.UPDATE,
    Action.DELETE,
    Action.TOGGLE_ACTIVITY,
    Action.VIEW_HISTORY,
)

MODULES = {
    Module.DEPARTMENT_MANAGEMENT: {
        'name_en': 'Department Management',
        'name_ar': 'إدارة الأقسام',
        'description_en': 'Manage departments and their activity status',
        'description_ar': 'إدارة الأقسام وحالة تفعيلها',
        'sort_order': 10,
        'actions': STANDARD_ACTIONS,
    },
    Module.JOB_TITLE_MANAGEMENT: {
        'name_en': 'Job Title Management',
        'name_ar': 'إدارة المسميات الوظيفية',
        'description_en': 'Manage job titles within departments',
        'description_ar': 'إدارة المسميات الوظيفية داخل الأقسام',
        'sort_order': 20,
        'actions': STANDARD_ACTIONS,
    },
    Module.USER_MANAGEMENT: {
        'name_en': 'User Management',
        'name_ar': 'إدارة المستخدمين',
        'description_en': 'Manage user accounts, roles and direct grants',
        'description_ar': 'إدارة حسابات المستخدمين والأدوار والصلاحيات المباشرة',
        'sort_order': 30,
        'actions': STANDARD_ACTIONS,
    },
    Module.ROLE_MANAGEMENT: {
        'name_en': 'Role Management',
        'name_ar': 'إدارة الأدوار',
        'description_en': 'Manage roles and the permissions they grant',
        'description_ar': 'إدارة الأدوار والصلاحيات الممنوحة لها',
        'sort_order': 40,
        'actions': STANDARD_ACTIONS,
    },
    Module.PERMIT_MANAGEMENT: {
        'name_en': 'Permit Management',
        'name_ar': 'إدارة التصاريح',
        'description_en': 'Manage work permits',
        'description_ar': 'إدارة تصاريح العمل',
        'sort_order': 50,
        'actions': (
            Action.VIEW,
            Action.CREATE,
            Action.UPDATE,
            Action.DELETE,
            Action.VIEW_HISTORY,
        ),
    },
}

# Resource names (URL segments, UI subjects) -> module
RESOURCE_MODULES = {
    'departments': Module.DEPARTMENT_MANAGEMENT,
    'job-titles': Module.JOB_TITLE_MANAGEMENT,
    'users': Module.USER_MANAGEMENT,
    'roles': Module.ROLE_MANAGEMENT,
    'permits': Module.PERMIT_MANAGEMENT,
}


# ============================================================================
# PERMISSION KEYS
# ============================================================================

@dataclass(frozen=True)
class PermissionKey:
    """A (module, action) pair. Hashable, usable in sets."""
    module: Module
    action: Action

    @property
    def id(self) -> str:
        return f"{self.module.value}:{self.action.value}"

    def __str__(self):
        return self.id

    @classmethod
    def coerce(cls, module, action) -> Optional['PermissionKey']:
        """
        Build a key from enum members or raw slugs.

        The module may also be given by its resource name ('roles' ->
        role-management). Returns None when the module or action is unknown,
        or when the module does not support the action.
        """
        try:
            module = RESOURCE_MODULES.get(module) or Module(module)
            action = Action(action)
        except (ValueError, TypeError):
            return None
        if action not in MODULES[module]['actions']:
            return None
        return cls(module, action)

    @classmethod
    def parse(cls, permission_id: str) -> Optional['PermissionKey']:
        """Parse the ``"<module>:<action>"`` wire form. Returns None if invalid."""
        if not isinstance(permission_id, str) or permission_id.count(':') != 1:
            return None
        module, action = permission_id.split(':')
        key = cls.coerce(module, action)
        # Only the canonical module slug is a valid id
        if key is None or key.id != permission_id:
            return None
        return key


def _build_catalog() -> Tuple[PermissionKey, ...]:
    keys = []
    for module, info in MODULES.items():
        for action in info['actions']:
            keys.append(PermissionKey(module, action))
    ids = [key.id for key in keys]
    if len(ids) != len(set(ids)):
        raise ValueError('Permission catalog contains duplicate identifiers')
    return tuple(keys)


ALL_PERMISSIONS = _build_catalog()


def actions_for_module(module) -> Tuple[Action, ...]:
    """Actions a module supports, or an empty tuple for unknown modules."""
    try:
        return tuple(MODULES[Module(module)]['actions'])
    except ValueError:
        return ()


def is_known_permission(module, action) -> bool:
    return PermissionKey.coerce(module, action) is not None


def all_permission_ids() -> List[str]:
    return [key.id for key in ALL_PERMISSIONS]


def permission_label(key: PermissionKey, language: str = 'en') -> str:
    """Human label, e.g. 'Department Management - Create'."""
    lang = 'ar' if language == 'ar' else 'en'
    module_name = MODULES[key.module][f'name_{lang}']
    return f"{module_name} - {ACTION_LABELS[key.action][lang]}"


def grouped_catalog() -> Dict[str, dict]:
    """
    Catalog grouped by module, as served by ``GET /permissions/groups/``.

    {
        'department-management': {
            'module_info': {'name_en', 'name_ar', 'description_en', 'description_ar'},
            'permissions': [{'id', 'action', 'name_en', 'name_ar'}, ...]
        },
        ...
    }
    """
    groups = {}
    ordered = sorted(MODULES.items(), key=lambda item: item[1]['sort_order'])
    for module, info in ordered:
        groups[module.value] = {
            'module_info': {
                'name_en': info['name_en'],
                'name_ar': info['name_ar'],
                'description_en': info['description_en'],
                'description_ar': info['description_ar'],
            },
            'permissions': [
                {
                    'id': PermissionKey(module, action).id,
                    'action': action.value,
                    'name_en': ACTION_LABELS[action]['en'],
                    'name_ar': ACTION_LABELS[action]['ar'],
                }
                for action in info['actions']
            ],
        }
    return groups


# ============================================================================
# SYSTEM ROLES
# ============================================================================

class CoreRoles:
    """System role identifiers."""
    SUPER_ADMIN = 'super-admin'


CORE_ROLES = [
    {
        'code': 'super-admin',
        'name_en': 'Super Admin',
        'name_ar': 'مدير النظام',
        'description_en': 'Full access to every module',
        'description_ar': 'صلاحيات كاملة على جميع الوحدات',
        'is_super_admin': True,
        'permissions': 'ALL',  # Special marker - every catalog permission
    },
]
