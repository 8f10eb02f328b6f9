"""
Session context: the one place an actor snapshot and its tokens live.

Created on login, refreshed on demand, destroyed on 401 or logout. The
evaluator, the gate and the client all receive the same instance explicitly.
"""
import logging
import threading
from typing import Callable, List, Optional

from core.access_control.actor import Actor

logger = logging.getLogger(__name__)


class SessionContext:
    """
    Holds the current actor and tokens.

    ``invalidate`` is idempotent: when several requests fail with 401 at once,
    only the first call clears state and fires the ``on_invalidated`` hooks
    (typically the redirect to the login screen).
    """

    def __init__(self, on_invalidated: Optional[Callable[[str], None]] = None):
        self._lock = threading.Lock()
        self._actor: Optional[Actor] = None
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._hooks: List[Callable[[str], None]] = []
        if on_invalidated is not None:
            self._hooks.append(on_invalidated)

    @property
    def actor(self) -> Optional[Actor]:
        return self._actor

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    @property
    def is_authenticated(self) -> bool:
        return self._actor is not None and self._access_token is not None

    def add_invalidation_hook(self, hook: Callable[[str], None]):
        self._hooks.append(hook)

    def establish(self, actor: Actor, access_token: str, refresh_token: Optional[str] = None):
        """Start a session (login)."""
        with self._lock:
            self._actor = actor
            self._access_token = access_token
            self._refresh_token = refresh_token
        logger.info("Session established for user %s", actor.id)

    def replace_actor(self, actor: Actor):
        """Swap in a refreshed actor snapshot, keeping the tokens."""
        with self._lock:
            if self._access_token is None:
                return
            self._actor = actor

    def replace_access_token(self, access_token: str):
        with self._lock:
            if self._access_token is not None:
                self._access_token = access_token

    def invalidate(self, reason: str = 'Session expired') -> bool:
        """
        Clear the session.

        Returns:
            True if this call cleared an active session, False if there was
            nothing left to clear.
        """
        with self._lock:
            if self._actor is None and self._access_token is None:
                return False
            user_id = self._actor.id if self._actor is not None else None
            self._actor = None
            self._access_token = None
            self._refresh_token = None

        logger.warning("Session invalidated for user %s: %s", user_id, reason)
        for hook in list(self._hooks):
            hook(reason)
        return True
