"""Password login form."""

import streamlit as st

from ...error_handling import GantzError
from ...logging_config import get_logger
from ..components.common import navigate_to
from ..components.error_display import display_error
from ..handlers.session import get_session_gate, sign_in

logger = get_logger(__name__)


def render_login_page() -> None:
    st.markdown("## GANTZ 로그인")

    gate = get_session_gate()
    if gate.state.is_authenticated:
        st.success(f"{gate.email} 로 로그인되어 있어요.")
        return

    with st.form("login_form"):
        email = st.text_input("ID", placeholder="ID")
        password = st.text_input("PW", placeholder="PW", type="password")
        submitted = st.form_submit_button("로그인", use_container_width=True, type="primary")

    if not submitted:
        return

    try:
        state = sign_in(email, password)
    except GantzError as e:
        display_error(e)
        return

    logger.info("login_completed", email=state.email, is_admin=state.is_admin)
    st.toast("로그인 성공")
    navigate_to("home")
