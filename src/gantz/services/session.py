"""
Session gate: who is viewing, and may they see admin controls.

One gate per browser session. It re-resolves on ``start()``, at the start of
every page run through ``refresh()``, and on every auth-state notification
from its ``AuthClient``, and pushes the new state to its own subscribers.
Resolution never raises: any failure leaves the viewer anonymous.

The admin flag only drives what the pages render. ``AccessPolicy`` in the
record store performs the same comparison before every admin-only write.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass

from ..error_handling import GantzError
from ..logging_config import get_logger, log_error
from .auth import AuthClient, AuthEvent, AuthSession, Subscription

logger = get_logger(__name__)


def is_admin_email(email: str | None, admin_email: str) -> bool:
    """Exact, case-sensitive match against the configured admin address."""
    return email is not None and email == admin_email


@dataclass(frozen=True)
class SessionState:
    email: str | None = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.email is not None


ANONYMOUS = SessionState()

SessionListener = Callable[[SessionState], None]


class SessionGate:
    """Observable session context for one viewer."""

    def __init__(self, auth_client: AuthClient, admin_email: str):
        self.auth_client = auth_client
        self.admin_email = admin_email
        self._state = ANONYMOUS
        self._listeners: list[SessionListener] = []
        self._lock = threading.Lock()
        self._auth_subscription: Subscription | None = None
        self._refreshing = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def email(self) -> str | None:
        return self._state.email

    @property
    def is_admin(self) -> bool:
        return self._state.is_admin

    def start(self) -> SessionState:
        """Follow auth-state changes and resolve once."""
        if self._auth_subscription is None:
            self._auth_subscription = self.auth_client.on_auth_state_change(self._on_auth_change)
        return self.refresh()

    def stop(self) -> None:
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None

    def subscribe(self, listener: SessionListener) -> Subscription:
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return Subscription(remove)

    def _on_auth_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        logger.debug("auth_state_changed", auth_event=event.value)
        # a provider dropping an expired session mid-refresh is resolved by that refresh
        if self._refreshing:
            return
        self.refresh()

    def refresh(self) -> SessionState:
        """Re-resolve the viewer; never raises."""
        self._refreshing = True
        try:
            user = self.auth_client.get_current_user()
            email = user.email if user else None
            state = SessionState(email=email, is_admin=is_admin_email(email, self.admin_email))
        except GantzError as e:
            logger.warning("session_resolution_failed", code=e.code)
            state = ANONYMOUS
        except Exception as e:
            log_error(e, {"operation": "session_refresh"})
            state = ANONYMOUS
        finally:
            self._refreshing = False

        self._state = state

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                log_error(e, {"operation": "session_listener"})
        return state
