"""
Permission decorators for function-based views.

Backend counterpart of the request gate: the same evaluator decides, so a
call the client lets through is re-validated here with identical rules.
"""
import logging
from functools import wraps

from rest_framework import status
from rest_framework.response import Response

from core.access_control.catalog import Action, PermissionKey
from core.access_control.services import user_can_perform_action

logger = logging.getLogger(__name__)

METHOD_ACTIONS = {
    'GET': Action.VIEW,
    'HEAD': Action.VIEW,
    'OPTIONS': Action.VIEW,
    'POST': Action.CREATE,
    'PUT': Action.UPDATE,
    'PATCH': Action.UPDATE,
    'DELETE': Action.DELETE,
}


def _get_action_from_method(http_method):
    """Map HTTP method to action; unknown methods get no action (denied)."""
    return METHOD_ACTIONS.get(http_method)


def require_permission(module, action=None):
    """
    Decorator to check module-action permissions for function-based views.

    Args:
        module: Module member or slug (e.g. Module.DEPARTMENT_MANAGEMENT)
        action: The action to check. If None, derived from the HTTP method

    Usage:
        # Derive action from HTTP method (GET = view, POST = create, ...)
        @api_view(['GET', 'POST'])
        @require_permission(Module.DEPARTMENT_MANAGEMENT)
        def department_list(request):
            ...

        # Explicit action
        @api_view(['POST'])
        @require_permission(Module.DEPARTMENT_MANAGEMENT, Action.DELETE)
        def department_bulk_delete(request):
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return Response(
                    {'error': 'Authentication required'},
                    status=status.HTTP_401_UNAUTHORIZED
                )

            determined_action = action or _get_action_from_method(request.method)

            allowed, reason = user_can_perform_action(request.user, module, determined_action)

            if not allowed:
                key = PermissionKey.coerce(module, determined_action)
                logger.info(
                    "Permission denied: user %s %s %s (%s)",
                    request.user.pk, request.method, request.path, reason
                )
                return Response(
                    {
                        'error': 'Permission denied',
                        'detail': reason,
                        'required_permission': {
                            'id': key.id if key else None,
                            'module': str(module),
                            'action': str(determined_action) if determined_action else None,
                        }
                    },
                    status=status.HTTP_403_FORBIDDEN
                )

            return view_func(request, *args, **kwargs)

        # Metadata for introspection (used by the gate sync test)
        wrapper.required_module = module
        wrapper.required_action = action

        return wrapper
    return decorator
