"""
Main Streamlit application for gantz.

Run with ``streamlit run src/gantz/main.py``.
"""

import streamlit as st

from gantz.logging_config import configure_structured_logging, get_logger
from gantz.ui.components.common import render_footer, render_header, render_sidebar
from gantz.ui.components.error_display import error_context
from gantz.ui.handlers.photos import close_photo_feed
from gantz.ui.handlers.session import refresh_session
from gantz.ui.pages.home import render_home_page
from gantz.ui.pages.login import render_login_page
from gantz.ui.pages.memos import render_memos_page
from gantz.ui.pages.people import render_people_page
from gantz.ui.pages.photos import render_photos_page

configure_structured_logging()
logger = get_logger(__name__)

PAGE_RENDERERS = {
    "home": render_home_page,
    "photos": render_photos_page,
    "memos": render_memos_page,
    "people": render_people_page,
    "login": render_login_page,
}


def initialize_session_state() -> None:
    if "current_page" not in st.session_state:
        st.session_state.current_page = "home"


def apply_navigation() -> None:
    """Switch to a queued page, tearing down the gallery feed when leaving it."""
    next_page = st.session_state.pop("next_page", None)
    if not next_page:
        return

    previous_page = st.session_state.current_page
    st.session_state.current_page = next_page
    logger.info("page_changed", from_page=previous_page, to_page=next_page)

    if previous_page == "photos" and next_page != "photos":
        close_photo_feed()


def render_main_content() -> None:
    current_page = st.session_state.current_page
    renderer = PAGE_RENDERERS.get(current_page)

    with error_context(f"render_{current_page}"):
        if renderer is None:
            st.warning(f"'{current_page}' 페이지를 찾을 수 없어요.")
            if st.button("🏠 Home", type="primary"):
                st.session_state.next_page = "home"
                st.rerun()
            return
        renderer()


def main() -> None:
    """Main application entry point."""
    st.set_page_config(
        page_title="GANTZ",
        page_icon="🕵️",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    apply_navigation()

    session = refresh_session()

    logger.debug("page_rendering", page=st.session_state.current_page, email=session.email, is_admin=session.is_admin)

    render_header()
    render_sidebar(session)

    with st.container():
        render_main_content()

    render_footer()


if __name__ == "__main__":
    main()
