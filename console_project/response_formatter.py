"""
Response envelope for every console endpoint.

    {"status": "success" | "error", "message": str, "data": ... | null}

Validation failures are flattened into ``message``. Authorization failures
keep their machine-readable part so the client can tell which permission was
missing:

    {
        "status": "error",
        "message": "Role 'Clerk' does not grant 'department-management:create'",
        "data": {"error": "Permission denied", "required_permission": {...}}
    }
"""
from rest_framework import status as http_status
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from rest_framework.views import exception_handler

ENVELOPE_KEYS = frozenset(('status', 'message', 'data'))

# Kept in ``data`` when a view answers with {'error': ..., 'detail': ...}
PERMISSION_ERROR_KEYS = ('error', 'required_permission')


def envelope(status, message='', data=None):
    return {'status': status, 'message': message, 'data': data}


def is_envelope(data):
    return isinstance(data, dict) and ENVELOPE_KEYS <= set(data)


def custom_exception_handler(exc, context):
    """DRF exception handler: DRF's own error bodies go out as error envelopes."""
    response = exception_handler(exc, context)
    if response is not None:
        response.data = error_envelope(response.data)
    return response


def flatten_errors(errors):
    """
    {'code': ['required'], 'parent': {'id': ['bad']}} -> "code: required; parent: id: bad"
    """
    if isinstance(errors, dict):
        return '; '.join(f"{field}: {flatten_errors(value)}" for field, value in errors.items())
    if isinstance(errors, (list, tuple)):
        return ', '.join(flatten_errors(value) for value in errors)
    return str(errors)


def error_envelope(errors):
    if not isinstance(errors, dict):
        return envelope('error', flatten_errors(errors))

    if 'error' in errors:
        data = {key: errors[key] for key in PERMISSION_ERROR_KEYS if key in errors}
        return envelope('error', str(errors.get('detail') or errors['error']), data)

    fields = {key: value for key, value in errors.items() if key != 'detail'}
    message = flatten_errors(fields) if fields else str(errors.get('detail', ''))
    return envelope('error', message)


def success_envelope(data):
    if isinstance(data, dict) and set(data) == {'detail'}:
        return envelope('success', str(data['detail']))
    if isinstance(data, dict) and 'message' in data and set(data) <= {'message', 'data'}:
        return envelope('success', str(data['message']), data.get('data'))
    if not data and not isinstance(data, list):
        return envelope('success')
    return envelope('success', data=data)


def validation_error_detail(exc):
    """Body for a Django ValidationError raised by a service."""
    if hasattr(exc, 'message_dict'):
        return exc.message_dict
    return {'detail': '; '.join(exc.messages)}


class StandardizedJSONRenderer(JSONRenderer):
    """Wraps every body that is not an envelope yet; 204 stays empty."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get('response')
        if response is not None:
            if response.status_code == http_status.HTTP_204_NO_CONTENT:
                return b''
            if not is_envelope(data):
                data = error_envelope(data) if response.status_code >= 400 else success_envelope(data)
        return super().render(data, accepted_media_type, renderer_context)


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Usage:
        return success_response({'deleted': 3}, message="3 departments deleted")
    """
    return Response(envelope('success', message, data), status=status_code)
