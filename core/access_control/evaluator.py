"""
Permission evaluation.

Pure functions over an ``Actor`` snapshot. Nothing here touches the database
or the network, so the backend decorators and the API client share the exact
same rules.

Permission Logic (priority order, first match wins):
1. No actor, or an inactive one → denied
2. Unknown module/action, or action not offered by the module → denied
3. Actor full access → allowed
4. Role super admin / role full access → allowed
5. Direct grant ("<module>:<action>" in actor.permissions) → allowed
6. Grouped role grant (role.permissions[module][action] is True) → allowed
7. Default: denied
"""
from typing import Dict, List, Optional, Tuple

from core.access_control.actor import Actor
from core.access_control.catalog import ALL_PERMISSIONS, Action, MODULES, Module, PermissionKey


def explain(actor: Optional[Actor], module, action) -> Tuple[bool, str]:
    """
    Check if an actor can perform an action on a module.

    Args:
        actor: Actor snapshot, or None when nobody is logged in
        module: Module member or slug (e.g. 'department-management')
        action: Action member or slug (e.g. 'create')

    Returns:
        Tuple of (allowed: bool, reason: str)
    """
    if actor is None:
        return False, "Authentication required"
    if not actor.is_active:
        return False, "User account is inactive"

    key = PermissionKey.coerce(module, action)
    if key is None:
        return False, f"Permission '{module}:{action}' does not exist"

    if actor.has_full_access:
        return True, "Permission granted (full access)"

    role = actor.role
    if role is not None and role.is_super_admin:
        return True, "Permission granted (super admin role)"
    if role is not None and role.has_full_access:
        return True, "Permission granted (role full access)"

    if key in actor.permissions:
        return True, "Permission granted (direct grant)"

    if role is not None and role.permissions.get(key.module, {}).get(key.action) is True:
        return True, "Permission granted (role)"

    if role is None:
        return False, f"No active role grants '{key.id}'"
    return False, f"Role '{role.name_en or role.id}' does not grant '{key.id}'"


def evaluate(actor: Optional[Actor], module, action) -> bool:
    """Allow/deny only. Never raises."""
    try:
        allowed, _ = explain(actor, module, action)
    except (AttributeError, TypeError):
        # Malformed actor objects are untrusted.
        return False
    return allowed


def can_access(actor, module) -> bool:
    return evaluate(actor, module, Action.VIEW)


def can_create(actor, module) -> bool:
    return evaluate(actor, module, Action.CREATE)


def can_update(actor, module) -> bool:
    return evaluate(actor, module, Action.UPDATE)


def can_delete(actor, module) -> bool:
    return evaluate(actor, module, Action.DELETE)


def can_toggle_activity(actor, module) -> bool:
    return evaluate(actor, module, Action.TOGGLE_ACTIVITY)


def can_view_history(actor, module) -> bool:
    return evaluate(actor, module, Action.VIEW_HISTORY)


def grouped_permissions(actor: Optional[Actor]) -> Dict[str, Dict[str, bool]]:
    """
    Effective permissions of an actor for every catalog entry.

    Returns:
        {'department-management': {'view': True, 'create': False, ...}, ...}
    """
    grouped = {}
    for key in ALL_PERMISSIONS:
        grouped.setdefault(key.module.value, {})[key.action.value] = evaluate(actor, key.module, key.action)
    return grouped


def accessible_modules(actor: Optional[Actor]) -> List[Module]:
    """Modules on which the actor has at least one allowed action."""
    return [
        module for module, info in MODULES.items()
        if any(evaluate(actor, module, action) for action in info['actions'])
    ]


class PermissionEvaluator:
    """
    Evaluator bound to a session context.

    The context is anything exposing an ``actor`` attribute (see
    ``console_client.session.SessionContext``); the actor is read on every
    call so a refreshed snapshot takes effect immediately.
    """

    def __init__(self, session):
        self.session = session

    @property
    def actor(self) -> Optional[Actor]:
        return self.session.actor

    def evaluate(self, module, action) -> bool:
        return evaluate(self.actor, module, action)

    def explain(self, module, action) -> Tuple[bool, str]:
        return explain(self.actor, module, action)

    def can_access(self, module) -> bool:
        return can_access(self.actor, module)

    def can_create(self, module) -> bool:
        return can_create(self.actor, module)

    def can_update(self, module) -> bool:
        return can_update(self.actor, module)

    def can_delete(self, module) -> bool:
        return can_delete(self.actor, module)

    def can_toggle_activity(self, module) -> bool:
        return can_toggle_activity(self.actor, module)

    def can_view_history(self, module) -> bool:
        return can_view_history(self.actor, module)
