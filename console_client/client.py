"""
HTTP client for the console API.

Every call passes the request gate before anything is sent. Responses are
unwrapped from the ``{status, message, data}`` envelope; failures map onto
the ``core.access_control.exceptions`` taxonomy.
"""
import logging
from typing import Iterable, Optional
from urllib.parse import urlsplit

import requests

from core.access_control.actor import Actor
from core.access_control.evaluator import PermissionEvaluator
from core.access_control.exceptions import ApiError, ForbiddenError, SessionExpiredError
from core.access_control.gate import RequestGate, normalize_path
from console_client.config import ClientConfig
from console_client.session import SessionContext

logger = logging.getLogger(__name__)

LOGIN_PATH = '/auth/login/'
LOGOUT_PATH = '/auth/logout/'
ME_PATH = '/auth/me/'
REFRESH_PATH = '/auth/token/refresh/'


def _error_message(payload, response):
    if isinstance(payload, dict):
        message = payload.get('message') or payload.get('detail') or payload.get('error')
        if message:
            return str(message)
    return response.reason or f"HTTP {response.status_code}"


class ConsoleClient:
    """
    Gate-enforcing API client bound to one SessionContext.

    Usage:
        session = SessionContext(on_invalidated=lambda reason: show_login())
        client = ConsoleClient(ClientConfig.from_env(), session)
        client.login('admin@example.com', 'secret')
        client.create('departments', {'code': 'OPS', 'name_en': 'Operations'})
    """

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[SessionContext] = None,
                 http: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        self.session = session if session is not None else SessionContext()
        self.http = http if http is not None else requests.Session()
        self.evaluator = PermissionEvaluator(self.session)
        self.gate = RequestGate(self.evaluator, base_path=urlsplit(self.config.base_url).path)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _url(self, path):
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(self, method, path, json=None, params=None):
        """
        Send one request and return the unwrapped ``data``.

        Raises:
            PermissionDeniedError: the gate refused the call (nothing was sent)
            SessionExpiredError: 401; the session has been invalidated
            ForbiddenError: 403; the session is kept
            ApiError: any other non-2xx answer
        """
        method = method.upper()
        self.gate.authorize(method, path)

        headers = {'Accept': 'application/json', 'Accept-Language': self.config.locale}
        if self.session.access_token:
            headers['Authorization'] = f"Bearer {self.session.access_token}"

        response = self.http.request(
            method,
            self._url(path),
            json=json,
            params=params,
            headers=headers,
            timeout=self.config.timeout,
        )
        return self._handle_response(method, path, response)

    def _handle_response(self, method, path, response):
        payload = None
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = None

        status_code = response.status_code
        if status_code == 401:
            message = _error_message(payload, response)
            if normalize_path(path) == LOGIN_PATH:
                raise ApiError(401, message, payload)
            self.session.invalidate(message)
            raise SessionExpiredError(method, path, message)

        if status_code == 403:
            message = _error_message(payload, response)
            logger.error("Backend refused %s %s: %s", method, path, message)
            raise ForbiddenError(message, payload)

        if not 200 <= status_code < 300:
            raise ApiError(status_code, _error_message(payload, response), payload)

        if isinstance(payload, dict) and {'status', 'message', 'data'} <= set(payload):
            return payload['data']
        return payload

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def login(self, email, password) -> Actor:
        """Authenticate and establish the session. Returns the actor."""
        data = self.request('POST', LOGIN_PATH, json={'email': email, 'password': password})
        actor = Actor.from_payload(data['user'])
        tokens = data['tokens']
        self.session.establish(actor, tokens['access'], tokens.get('refresh'))
        return actor

    def refresh_permissions(self) -> Optional[Actor]:
        """
        Re-read the actor from ``GET /auth/me/``.

        An inactive user ends the session; None is returned then.
        """
        actor = Actor.from_payload(self.request('GET', ME_PATH))
        if not actor.is_active:
            self.session.invalidate('User account is inactive')
            return None
        self.session.replace_actor(actor)
        return actor

    def refresh_access_token(self) -> str:
        data = self.request('POST', REFRESH_PATH, json={'refresh': self.session.refresh_token})
        self.session.replace_access_token(data['access'])
        return data['access']

    def logout(self):
        """Blacklist the refresh token and clear the session, even if the call fails."""
        try:
            if self.session.refresh_token:
                self.request('POST', LOGOUT_PATH, json={'refresh': self.session.refresh_token})
        finally:
            self.session.invalidate('Logged out')

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def list(self, resource, **params):
        return self.request('GET', f"/{resource}/", params=params or None)

    def get(self, resource, pk):
        return self.request('GET', f"/{resource}/{pk}/")

    def create(self, resource, data):
        return self.request('POST', f"/{resource}/", json=data)

    def update(self, resource, pk, data, partial=True):
        return self.request('PATCH' if partial else 'PUT', f"/{resource}/{pk}/", json=data)

    def delete(self, resource, pk):
        return self.request('DELETE', f"/{resource}/{pk}/")

    def toggle_activity(self, resource, pk):
        return self.request('POST', f"/{resource}/{pk}/toggle-activity/")

    def bulk_delete(self, resource, ids: Iterable):
        """Checked against the same permission as a single delete."""
        return self.request('POST', f"/{resource}/bulk-delete/", json={'ids': list(ids)})

    def bulk_toggle(self, resource, ids: Iterable, is_active: bool):
        """Checked against the same permission as a single toggle."""
        return self.request(
            'POST', f"/{resource}/bulk-toggle/", json={'ids': list(ids), 'is_active': is_active}
        )

    def permission_groups(self):
        return self.request('GET', '/permissions/groups/')
