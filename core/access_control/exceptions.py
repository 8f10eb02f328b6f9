"""
Authorization and session error taxonomy.

ConsoleError
├── PermissionDeniedError   gate refused the call before it was sent
├── SessionExpiredError     backend answered 401, local session torn down
├── ApiError                any other non-2xx answer
│   └── ForbiddenError      backend answered 403, session kept
└── HistoryUnavailableError revision fetch failed (recoverable)
"""


class ConsoleError(Exception):
    """Base class for every error raised by the access-control layer."""


class PermissionDeniedError(ConsoleError):
    """
    The actor lacks the permission required for an outgoing request.

    Raised before transmission; never retried.
    """

    def __init__(self, method, path, reason, permission=None):
        self.method = method.upper()
        self.path = path
        self.reason = reason
        self.permission = permission
        required = permission.id if permission is not None else 'unknown'
        super().__init__(f"Permission denied for {self.method} {path}. Required: {required} ({reason})")


class SessionExpiredError(ConsoleError):
    """The backend rejected the credentials (401)."""

    def __init__(self, method, path, message='Session expired'):
        self.method = method.upper()
        self.path = path
        super().__init__(f"{message} ({self.method} {path})")


class ApiError(ConsoleError):
    """Non-2xx response other than 401."""

    def __init__(self, status_code, message, payload=None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(f"HTTP {status_code}: {message}")


class ForbiddenError(ApiError):
    """The backend refused an action the local snapshot allowed (stale permissions)."""

    def __init__(self, message, payload=None):
        super().__init__(403, message, payload)


class HistoryUnavailableError(ConsoleError):
    """Revision history could not be fetched."""

    def __init__(self, entity_type, entity_id=None, cause=None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.cause = cause
        target = f"{entity_type}#{entity_id}" if entity_id is not None else entity_type
        super().__init__(f"History unavailable for {target}: {cause}")
