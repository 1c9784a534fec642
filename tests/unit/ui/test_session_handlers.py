"""
Unit tests for the per-run session wiring.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from gantz.error_handling import AuthenticationError
from gantz.services.auth import DevelopmentAuthClient
from gantz.services.session import ANONYMOUS
from gantz.ui.handlers.session import current_session, refresh_session, sign_in
from tests.conftest import ADMIN_EMAIL


class FakeSessionState(dict):
    """Dict with attribute access, like ``st.session_state``."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def session_state():
    state = FakeSessionState()
    with patch("gantz.ui.handlers.session.st") as mock_st:
        mock_st.session_state = state
        yield state


@pytest.fixture
def auth_client(session_state):
    client = DevelopmentAuthClient(ADMIN_EMAIL, "pw")
    with patch("gantz.ui.handlers.session.create_auth_client", return_value=client):
        yield client


class TestRefreshSession:
    def test_expired_session_loses_admin_on_next_run(self, auth_client):
        assert sign_in(ADMIN_EMAIL, "pw").is_admin is True
        assert current_session().is_admin is True

        auth_client.session.expires_at = datetime.now(UTC) - timedelta(seconds=1)

        assert refresh_session() == ANONYMOUS
        assert current_session() == ANONYMOUS

    def test_live_session_stays_admin(self, auth_client):
        sign_in(ADMIN_EMAIL, "pw")

        state = refresh_session()

        assert state.email == ADMIN_EMAIL
        assert state.is_admin is True

    def test_unconfigured_provider_is_anonymous(self, session_state):
        error = AuthenticationError("not configured", code="auth_not_configured")
        with patch("gantz.ui.handlers.session.create_auth_client", side_effect=error):
            assert refresh_session() == ANONYMOUS
            assert current_session() == ANONYMOUS
