"""
Request gate: maps outgoing API calls to the permission they require.

The table below must list every endpoint the backend exposes. An endpoint
without a rule is refused (fail closed); ``tests/test_gate_sync.py`` walks the
backend URL configuration and fails when a mutating endpoint has no rule.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Sequence, Tuple
from urllib.parse import urlsplit

from core.access_control.catalog import Action, MODULES, Module, PermissionKey, RESOURCE_MODULES
from core.access_control.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)

# Order matters: the first matching rule wins, so fixed segments
# (history, bulk-*) come before the generic /{id}/ shapes.
RESOURCE_ROUTES = (
    ('GET', '/{resource}/history/entity/{id}/', Action.VIEW_HISTORY),
    ('GET', '/{resource}/history/', Action.VIEW_HISTORY),
    ('POST', '/{resource}/bulk-delete/', Action.DELETE),
    ('POST', '/{resource}/bulk-toggle/', Action.TOGGLE_ACTIVITY),
    ('POST', '/{resource}/{id}/toggle-activity/', Action.TOGGLE_ACTIVITY),
    ('GET', '/{resource}/', Action.VIEW),
    ('POST', '/{resource}/', Action.CREATE),
    ('GET', '/{resource}/{id}/', Action.VIEW),
    ('PUT', '/{resource}/{id}/', Action.UPDATE),
    ('PATCH', '/{resource}/{id}/', Action.UPDATE),
    ('DELETE', '/{resource}/{id}/', Action.DELETE),
)

# Endpoints that need no permission (authentication itself)
PUBLIC_PATHS = frozenset({
    '/auth/login/',
    '/auth/logout/',
    '/auth/me/',
    '/auth/token/refresh/',
})

_READ_ALIASES = {'HEAD': 'GET', 'OPTIONS': 'GET'}


@dataclass(frozen=True)
class GateRule:
    method: str
    template: str
    permission: PermissionKey
    regex: Pattern

    @classmethod
    def build(cls, method: str, template: str, module: Module, action: Action) -> 'GateRule':
        pattern = re.escape(template).replace(re.escape('{id}'), r'[^/]+')
        return cls(
            method=method,
            template=template,
            permission=PermissionKey(module, action),
            regex=re.compile(f'^{pattern}$'),
        )

    def matches(self, method: str, path: str) -> bool:
        return self.method == method and self.regex.match(path) is not None


def build_gate_rules() -> Tuple[GateRule, ...]:
    rules = [
        GateRule.build('GET', '/permissions/groups/', Module.ROLE_MANAGEMENT, Action.VIEW),
    ]
    for resource, module in RESOURCE_MODULES.items():
        supported = MODULES[module]['actions']
        for method, template, action in RESOURCE_ROUTES:
            if action not in supported:
                continue
            rules.append(GateRule.build(method, template.replace('{resource}', resource), module, action))
    return tuple(rules)


GATE_RULES = build_gate_rules()


def normalize_path(url: str, base_path: str = '') -> str:
    """
    Reduce a URL to the API path the rules are written against.

    'http://host/api/departments/42?x=1' with base_path '/api' -> '/departments/42/'
    """
    path = urlsplit(url).path or '/'
    if not path.startswith('/'):
        path = '/' + path
    base = '/' + base_path.strip('/') if base_path.strip('/') else ''
    if base and (path == base or path.startswith(base + '/')):
        path = path[len(base):] or '/'
    if not path.endswith('/'):
        path += '/'
    return re.sub(r'/{2,}', '/', path)


def resolve_permission(method: str, url: str, rules: Sequence[GateRule] = GATE_RULES,
                       base_path: str = '') -> Optional[PermissionKey]:
    """Permission required for a call, or None when no rule covers it."""
    method = method.upper()
    method = _READ_ALIASES.get(method, method)
    path = normalize_path(url, base_path)
    for rule in rules:
        if rule.matches(method, path):
            return rule.permission
    return None


class RequestGate:
    """
    Pre-flight check run before every outgoing request.

    Stateless: it reads the actor through the evaluator and never changes it.
    """

    def __init__(self, evaluator, rules: Iterable[GateRule] = GATE_RULES,
                 public_paths=PUBLIC_PATHS, base_path: str = ''):
        self.evaluator = evaluator
        self.rules = tuple(rules)
        self.public_paths = frozenset(public_paths)
        self.base_path = base_path

    def is_public(self, url: str) -> bool:
        return normalize_path(url, self.base_path) in self.public_paths

    def authorize(self, method: str, url: str) -> Optional[PermissionKey]:
        """
        Raise PermissionDeniedError unless the current actor may make this call.

        Returns:
            The permission that was checked, or None for public endpoints.
        """
        path = normalize_path(url, self.base_path)
        if path in self.public_paths:
            return None

        permission = resolve_permission(method, path, self.rules)
        if permission is None:
            logger.warning("Blocked %s %s: no permission rule covers this endpoint", method.upper(), path)
            raise PermissionDeniedError(method, path, "No permission rule covers this endpoint")

        allowed, reason = self.evaluator.explain(permission.module, permission.action)
        if not allowed:
            logger.warning("Blocked %s %s: %s", method.upper(), path, reason)
            raise PermissionDeniedError(method, path, reason, permission)
        return permission

    def is_allowed(self, method: str, url: str) -> bool:
        try:
            self.authorize(method, url)
        except PermissionDeniedError:
            return False
        return True
