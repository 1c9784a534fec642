"""Per-browser-session wiring of the session gate."""

import streamlit as st

from ...config import get_admin_email
from ...error_handling import GantzError
from ...logging_config import get_logger
from ...services.auth import create_auth_client
from ...services.session import ANONYMOUS, SessionGate, SessionState

logger = get_logger(__name__)


def get_session_gate() -> SessionGate:
    """Get this browser session's gate, creating and starting it on first use."""
    if "session_gate" not in st.session_state:
        gate = SessionGate(create_auth_client(), get_admin_email())
        gate.start()
        st.session_state.session_gate = gate
        logger.info("session_gate_started", email=gate.email, is_admin=gate.is_admin)
    return st.session_state.session_gate


def current_session() -> SessionState:
    """The viewer of this run; anonymous when the gate cannot be built."""
    try:
        return get_session_gate().state
    except GantzError as e:
        logger.warning("session_gate_unavailable", code=e.code)
        return ANONYMOUS


def refresh_session() -> SessionState:
    """Re-resolve the viewer at the start of a run so expired sessions lose admin."""
    try:
        gate = get_session_gate()
    except GantzError as e:
        logger.warning("session_gate_unavailable", code=e.code)
        return ANONYMOUS
    return gate.refresh()


def sign_in(email: str, password: str) -> SessionState:
    """
    Sign in with the identity provider.

    The gate re-resolves through its auth-state subscription.

    Raises:
        AuthenticationError: If the credentials are rejected
    """
    gate = get_session_gate()
    gate.auth_client.sign_in_with_password(email, password)
    return gate.state


def sign_out() -> SessionState:
    gate = get_session_gate()
    gate.auth_client.sign_out()
    return gate.state
