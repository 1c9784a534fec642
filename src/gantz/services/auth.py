"""Authentication service for gantz application.

Password sign-in against a GoTrue-compatible identity provider (the hosted
Supabase auth API), plus a development provider configured from environment
variables. A client instance belongs to one browser session: it holds that
session's tokens and notifies subscribers whenever the auth state changes.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import jwt
import requests

from ..config import get_env, is_development
from ..error_handling import AuthenticationError, NetworkError
from ..logging_config import get_logger, log_security_event, log_user_action

logger = get_logger(__name__)


@dataclass
class UserInfo:
    """Represents an authenticated user returned by the identity provider."""

    user_id: str
    email: str | None


@dataclass
class AuthSession:
    """Tokens issued by a successful sign-in."""

    access_token: str
    user: UserInfo
    refresh_token: str | None = None
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at


class AuthEvent(Enum):
    """Auth state change notifications."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


AuthListener = Callable[[AuthEvent, AuthSession | None], None]


class Subscription:
    """Handle returned by ``subscribe``-style calls."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._unsubscribe()


def token_expiry(access_token: str) -> datetime | None:
    """Read the ``exp`` claim of an access token without verifying it.

    The provider verifies the token on every ``/user`` call; the claim is only
    used to skip that call for sessions that have already expired.
    """
    try:
        claims = jwt.decode(access_token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    exp = claims.get("exp")
    return datetime.fromtimestamp(exp, UTC) if isinstance(exp, int | float) else None


class AuthClient:
    """Session holder and auth-state notifier shared by every provider."""

    def __init__(self) -> None:
        self._session: AuthSession | None = None
        self._listeners: list[AuthListener] = []
        self._lock = threading.Lock()

    # Provider hooks

    def _request_session(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError

    def _fetch_user(self, session: AuthSession) -> UserInfo | None:
        raise NotImplementedError

    def _revoke(self, session: AuthSession) -> None:
        """Tell the provider the session is over."""

    # Public API

    @property
    def session(self) -> AuthSession | None:
        return self._session

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Subscribe to sign-in/sign-out notifications."""
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return Subscription(remove)

    def _emit(self, event: AuthEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event, self._session)

    def _drop_session(self, reason: str) -> None:
        """Forget a session the provider no longer honours and announce it."""
        session = self._session
        if session is None:
            return
        self._session = None
        logger.info("session_dropped", user_id=session.user.user_id, reason=reason)
        self._emit(AuthEvent.SIGNED_OUT)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Sign in and start a session.

        Raises:
            AuthenticationError: If the credentials are rejected
            NetworkError: If the provider cannot be reached
        """
        email = (email or "").strip()
        if not email or not password:
            raise AuthenticationError(
                "Email and password are required",
                code="credentials_missing",
                user_message="아이디와 비밀번호를 입력해 주세요.",
            )

        session = self._request_session(email, password)
        self._session = session
        log_user_action(session.user.email or session.user.user_id, "signed_in")
        self._emit(AuthEvent.SIGNED_IN)
        return session

    def sign_out(self) -> None:
        """End the current session. Provider failures are logged, never raised."""
        session = self._session
        self._session = None
        if session is not None:
            try:
                self._revoke(session)
            except (requests.RequestException, NetworkError) as e:
                logger.warning("sign_out_revoke_failed", error=str(e))
            log_user_action(session.user.email or session.user.user_id, "signed_out")
        self._emit(AuthEvent.SIGNED_OUT)

    def get_current_user(self) -> UserInfo | None:
        """
        Resolve the user behind the current session.

        Returns:
            UserInfo | None: None when there is no session or it has expired

        Raises:
            AuthenticationError: If the provider rejects the session
            NetworkError: If the provider cannot be reached
        """
        session = self._session
        if session is None:
            return None
        if session.is_expired():
            self._drop_session("expired")
            return None
        return self._fetch_user(session)


class SupabaseAuthClient(AuthClient):
    """GoTrue REST client (``/auth/v1``)."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0) -> None:
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _call(self, method: str, path: str, access_token: str | None = None, **kwargs: Any) -> requests.Response:
        try:
            return requests.request(
                method,
                f"{self.base_url}/auth/v1/{path}",
                headers=self._headers(access_token),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise NetworkError(
                f"Identity provider unreachable: {e}",
                code="auth_provider_unreachable",
                details={"path": path},
                original_exception=e,
            ) from e

    @staticmethod
    def _error_message(response: requests.Response, fallback: str) -> str:
        try:
            data = response.json()
        except ValueError:
            return fallback
        return data.get("error_description") or data.get("msg") or data.get("message") or fallback

    @staticmethod
    def _user_from_payload(data: dict[str, Any]) -> UserInfo:
        return UserInfo(user_id=str(data.get("id", "")), email=data.get("email"))

    def _request_session(self, email: str, password: str) -> AuthSession:
        response = self._call("POST", "token?grant_type=password", json={"email": email, "password": password})
        if response.status_code != 200:
            message = self._error_message(response, "Invalid login credentials")
            log_security_event("sign_in_failed", context={"email": email, "status": response.status_code})
            raise AuthenticationError(
                message,
                code="sign_in_failed",
                user_message=f"로그인 실패: {message}",
                details={"status": response.status_code},
            )

        data = response.json()
        access_token = data["access_token"]
        expires_at = token_expiry(access_token)
        if expires_at is None and data.get("expires_at"):
            expires_at = datetime.fromtimestamp(data["expires_at"], UTC)

        return AuthSession(
            access_token=access_token,
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            user=self._user_from_payload(data.get("user") or {}),
        )

    def _fetch_user(self, session: AuthSession) -> UserInfo | None:
        response = self._call("GET", "user", access_token=session.access_token)
        if response.status_code == 200:
            return self._user_from_payload(response.json())
        if response.status_code in (401, 403):
            self._drop_session(f"rejected_{response.status_code}")
            return None
        message = self._error_message(response, "Failed to get user")
        raise AuthenticationError(message, code="get_user_failed", details={"status": response.status_code})

    def _revoke(self, session: AuthSession) -> None:
        self._call("POST", "logout", access_token=session.access_token)


class DevelopmentAuthClient(AuthClient):
    """Single local account from DEV_USER_EMAIL / DEV_USER_PASSWORD."""

    def __init__(self, email: str | None = None, password: str | None = None) -> None:
        super().__init__()
        self.email = email or get_env("DEV_USER_EMAIL", "dev@example.com")
        self.password = password or get_env("DEV_USER_PASSWORD", "dev")
        logger.info("development_auth_mode_enabled", email=self.email)

    def _request_session(self, email: str, password: str) -> AuthSession:
        if email != self.email or password != self.password:
            log_security_event("sign_in_failed", context={"email": email, "mode": "development"})
            raise AuthenticationError(
                "Invalid login credentials",
                code="sign_in_failed",
                user_message="로그인 실패: Invalid login credentials",
            )
        return AuthSession(access_token=f"dev-{email}", user=UserInfo(user_id=f"dev-{email}", email=email))

    def _fetch_user(self, session: AuthSession) -> UserInfo | None:
        return session.user


def create_auth_client() -> AuthClient:
    """Build the auth client for one browser session.

    Development environments without AUTH_URL get the local account.
    """
    base_url = get_env("AUTH_URL")
    api_key = get_env("AUTH_API_KEY")
    if base_url and api_key:
        return SupabaseAuthClient(base_url, api_key, timeout=get_env("AUTH_TIMEOUT_SECONDS", 10.0, float))
    if is_development():
        return DevelopmentAuthClient()
    raise AuthenticationError(
        "AUTH_URL and AUTH_API_KEY are required outside development",
        code="auth_not_configured",
        user_message="로그인이 설정되지 않았습니다.",
    )
