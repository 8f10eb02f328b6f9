"""
Keeps the request gate table and the backend URL configuration in step.

A new endpoint without a gate rule would be refused by every client, and a
rule without an endpoint is a typo; both fail here.
"""
import re

from django.test import SimpleTestCase
from django.urls import Resolver404, URLPattern, URLResolver, get_resolver, resolve

from core.access_control.gate import GATE_RULES, PUBLIC_PATHS, resolve_permission

# Resources the catalog knows but this backend does not serve
CLIENT_ONLY_RESOURCES = ('permits',)

CHECKED_METHODS = ('get', 'post', 'put', 'patch', 'delete')


def iter_endpoints(patterns, prefix='/'):
    """(concrete path, callback) for every URL pattern, converters filled with 1."""
    for entry in patterns:
        if isinstance(entry, URLResolver):
            yield from iter_endpoints(entry.url_patterns, prefix + str(entry.pattern))
        elif isinstance(entry, URLPattern):
            yield re.sub(r'<[^>]+>', '1', prefix + str(entry.pattern)), entry.callback


def allowed_methods(callback):
    view_class = getattr(callback, 'cls', None)
    if view_class is None:
        return []
    names = getattr(view_class, 'http_method_names', CHECKED_METHODS)
    return [m for m in CHECKED_METHODS if m in names and hasattr(view_class, m)]


class GateSyncTests(SimpleTestCase):

    def test_every_backend_endpoint_has_a_rule(self):
        uncovered = []
        for path, callback in iter_endpoints(get_resolver().url_patterns):
            if path in PUBLIC_PATHS:
                continue
            for method in allowed_methods(callback):
                if resolve_permission(method.upper(), path) is None:
                    uncovered.append(f"{method.upper()} {path}")
        self.assertEqual(uncovered, [], "Endpoints without a gate rule")

    def test_every_rule_points_at_a_backend_endpoint(self):
        dangling = []
        for rule in GATE_RULES:
            path = rule.template.replace('{id}', '1')
            if path.strip('/').split('/')[0] in CLIENT_ONLY_RESOURCES:
                continue
            try:
                match = resolve(path)
            except Resolver404:
                dangling.append(f"{rule.method} {rule.template}")
                continue
            if rule.method.lower() not in allowed_methods(match.func):
                dangling.append(f"{rule.method} {rule.template}")
        self.assertEqual(dangling, [], "Gate rules without a backend endpoint")

    def test_public_paths_exist(self):
        for path in PUBLIC_PATHS:
            resolve(path)
