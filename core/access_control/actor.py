"""
Normalized actor snapshot.

An ``Actor`` is built once, when the user logs in or refreshes permissions,
from the ``me`` payload (client side) or from the database row (backend side,
see ``services.build_actor``). Both paths go through ``Actor.from_payload`` so
the role is resolved in exactly one place.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from core.access_control.catalog import Action, Module, PermissionKey

logger = logging.getLogger(__name__)


GroupedPermissions = Dict[Module, Dict[Action, bool]]


def group_permission_keys(keys: Iterable[PermissionKey]) -> GroupedPermissions:
    """{'department-management': {'view': True, ...}, ...} keyed by enums."""
    grouped: GroupedPermissions = {}
    for key in keys:
        grouped.setdefault(key.module, {})[key.action] = True
    return grouped


def _parse_permission_ids(raw_ids, owner) -> FrozenSet[PermissionKey]:
    keys = set()
    for raw_id in raw_ids or ():
        key = PermissionKey.parse(raw_id)
        if key is None:
            logger.debug("Ignoring unknown permission %r on %s", raw_id, owner)
            continue
        keys.add(key)
    return frozenset(keys)


def _parse_grouped(raw, owner) -> GroupedPermissions:
    """Accept either a flat id list or a {module: {action: bool}} mapping."""
    if not raw:
        return {}
    if isinstance(raw, (list, tuple, set, frozenset)):
        return group_permission_keys(_parse_permission_ids(raw, owner))

    grouped: GroupedPermissions = {}
    for module_slug, actions in raw.items():
        if not isinstance(actions, Mapping):
            continue
        for action_slug, allowed in actions.items():
            key = PermissionKey.coerce(module_slug, action_slug)
            if key is None:
                logger.debug("Ignoring unknown permission %s:%s on %s", module_slug, action_slug, owner)
                continue
            actions_granted = grouped.setdefault(key.module, {})
            actions_granted[key.action] = actions_granted.get(key.action, False) or allowed is True
    return grouped


@dataclass(frozen=True)
class ResolvedRole:
    id: Optional[str]
    name_en: str = ''
    name_ar: str = ''
    is_active: bool = True
    is_super_admin: bool = False
    has_full_access: bool = False
    permissions: GroupedPermissions = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> 'ResolvedRole':
        role_id = data.get('id')
        return cls(
            id=str(role_id) if role_id is not None else None,
            name_en=data.get('name_en') or '',
            name_ar=data.get('name_ar') or '',
            is_active=data.get('is_active', True) is not False,
            is_super_admin=bool(data.get('is_super_admin')),
            has_full_access=bool(data.get('has_full_access')),
            permissions=_parse_grouped(data.get('permissions'), f"role {role_id}"),
        )

    def to_payload(self) -> dict:
        return {
            'id': self.id,
            'name_en': self.name_en,
            'name_ar': self.name_ar,
            'is_active': self.is_active,
            'is_super_admin': self.is_super_admin,
            'has_full_access': self.has_full_access,
            'permissions': {
                module.value: {action.value: allowed for action, allowed in actions.items()}
                for module, actions in self.permissions.items()
            },
        }


@dataclass(frozen=True)
class Actor:
    """
    The authenticated user as seen by the permission evaluator.

    ``role`` is None when the user has no role, when the payload only carried
    a bare role id (kept in ``role_id``), or when the role is inactive.
    ``permissions`` holds the direct per-user grants.
    """
    id: str
    email: str = ''
    username: str = ''
    name_en: str = ''
    name_ar: str = ''
    is_active: bool = True
    has_full_access: bool = False
    role: Optional[ResolvedRole] = None
    role_id: Optional[str] = None
    permissions: FrozenSet[PermissionKey] = frozenset()

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> 'Actor':
        """Build an actor from the ``me``/login payload."""
        actor_id = str(data.get('id'))
        raw_role = data.get('role')

        role = None
        role_id = None
        if isinstance(raw_role, Mapping):
            role = ResolvedRole.from_payload(raw_role)
            role_id = role.id
            if not role.is_active:
                logger.info("Role %s of user %s is inactive; ignoring its grants", role.id, actor_id)
                role = None
        elif raw_role is not None:
            role_id = str(raw_role)

        return cls(
            id=actor_id,
            email=data.get('email') or '',
            username=data.get('username') or '',
            name_en=data.get('name_en') or '',
            name_ar=data.get('name_ar') or '',
            is_active=data.get('is_active', True) is not False,
            has_full_access=bool(data.get('has_full_access')),
            role=role,
            role_id=role_id,
            permissions=_parse_permission_ids(data.get('permissions'), f"user {actor_id}"),
        )

    @classmethod
    def from_user(cls, user) -> 'Actor':
        """Build an actor from a user object exposing ``to_actor_payload()``."""
        return cls.from_payload(user.to_actor_payload())

    def to_payload(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'username': self.username,
            'name_en': self.name_en,
            'name_ar': self.name_ar,
            'is_active': self.is_active,
            'has_full_access': self.has_full_access,
            'role': self.role.to_payload() if self.role else self.role_id,
            'permissions': sorted(key.id for key in self.permissions),
        }
