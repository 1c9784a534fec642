"""Reusable UI components for gantz application."""

from datetime import datetime

import streamlit as st

from ...logging_config import get_logger
from ...services.session import SessionState
from ..handlers.session import sign_out

logger = get_logger(__name__)

PAGES = {
    "🏠 Home": "home",
    "📷 사진": "photos",
    "📝 메모": "memos",
    "🕵️ AGENT": "people",
}


def navigate_to(page_key: str) -> None:
    """Queue a page change; main() applies it on the next run."""
    st.session_state.next_page = page_key
    st.rerun()


def render_empty_state(title: str, description: str = "", icon: str = "📭") -> None:
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown(
            f"""
        <div style='text-align: center; padding: 2rem 0;'>
            <div style='font-size: 3rem; margin-bottom: 1rem;'>{icon}</div>
            <h4 style='color: #666; margin-bottom: 0.5rem;'>{title}</h4>
            <p style='color: #888;'>{description}</p>
        </div>
        """,
            unsafe_allow_html=True,
        )


def render_loading_error(message: str, retry_key: str) -> bool:
    """
    Show a failed-load banner with a retry button.

    Returns:
        bool: True if retry was clicked
    """
    st.error(message)
    return st.button("다시 시도", key=retry_key)


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def render_header() -> None:
    st.markdown("# GANTZ")
    st.divider()


def render_user_badge(session: SessionState) -> None:
    """Signed-in email with a logout button, or a login entry for anonymous viewers."""
    if session.is_authenticated:
        st.markdown(f"👤 {session.email}")
        if session.is_admin:
            st.caption("간츠 관리자")
        if st.button("로그아웃", key="logout_button", use_container_width=True):
            sign_out()
            logger.info("user_logged_out", email=session.email)
            st.rerun()
    else:
        if st.button("로그인", key="login_nav_button", use_container_width=True):
            navigate_to("login")


def render_sidebar(session: SessionState) -> None:
    """Render the navigation bar."""
    with st.sidebar:
        st.markdown("### GANTZ")
        st.divider()

        current_page = st.session_state.current_page

        for page_name, page_key in PAGES.items():
            is_current = page_key == current_page

            if st.button(
                page_name,
                key=f"nav_{page_key}",
                use_container_width=True,
                type="primary" if is_current else "secondary",
            ):
                logger.info("page_navigation", from_page=current_page, to_page=page_key)
                navigate_to(page_key)

        st.divider()
        render_user_badge(session)


def render_footer() -> None:
    from ... import __version__

    st.divider()
    st.markdown(
        f"""
    <div style='text-align: center; color: #666; font-size: 0.8em;'>
        <strong>gantz v{__version__}</strong>
    </div>
    """,
        unsafe_allow_html=True,
    )
