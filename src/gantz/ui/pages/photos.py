"""Photo gallery: admin upload panel, paged grid and detail dialog."""

import streamlit as st

from ...error_handling import GantzError
from ...logging_config import get_logger
from ...models.photo import Photo
from ...services.feed import PaginatedFeed
from ...services.image_processor import get_image_processor
from ...services.records import get_record_store
from ...services.session import SessionState
from ...services.storage import get_media_storage
from ..components.common import format_timestamp, render_empty_state, render_loading_error
from ..components.error_display import display_error
from ..handlers.photos import (
    FEED_ERROR_KEY,
    SELECTED_KEY,
    create_photo,
    delete_photo,
    get_photo_feed,
    load_more_photos,
    save_caption,
)
from ..handlers.session import current_session

logger = get_logger(__name__)

GRID_COLUMNS = 3


def render_upload_panel(session: SessionState, feed: PaginatedFeed[Photo]) -> None:
    """Admin-only upload form."""
    with st.expander("업로드!", expanded=False):
        with st.form("photo_upload_form", clear_on_submit=True):
            uploaded_file = st.file_uploader("사진", type=["jpg", "jpeg", "png", "gif", "webp", "heic"])
            caption = st.text_input("캡션", placeholder="할 말 있어용?")
            submitted = st.form_submit_button("업로드!", type="primary")

        if not submitted:
            return

        try:
            with st.spinner("업로드 중…"):
                photo = create_photo(
                    get_record_store(),
                    get_media_storage(),
                    get_image_processor(),
                    session.email,
                    uploaded_file,
                    caption,
                    feed=feed,
                )
        except GantzError as e:
            display_error(e)
            return

        logger.info("photo_upload_completed", photo_id=photo.id)
        st.success("업로드 완료")


def _find_photo(feed: PaginatedFeed[Photo], photo_id: str) -> Photo | None:
    return next((item for item in feed.items if item.id == photo_id), None)


@st.dialog("사진", width="large")
def show_photo_dialog(photo_id: str) -> None:
    session = current_session()
    feed = get_photo_feed(get_record_store())
    photo = _find_photo(feed, photo_id)
    if photo is None:
        st.info("이미 삭제된 사진입니다.")
        return

    st.image(photo.image_url, use_container_width=True)
    if photo.taken_at is not None:
        st.caption(f"촬영: {format_timestamp(photo.taken_at)}")
    st.caption(f"등록: {format_timestamp(photo.created_at)}")

    if not session.is_admin:
        if photo.caption:
            st.markdown(photo.caption)
        return

    caption = st.text_input("캡션", value=photo.caption or "", placeholder="캡션", key=f"caption_{photo.id}")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("캡션 저장", key=f"save_caption_{photo.id}", type="primary", use_container_width=True):
            try:
                save_caption(get_record_store(), session.email, photo, caption, feed=feed)
                st.toast("저장 완료")
            except GantzError as e:
                display_error(e)
    with col2:
        with st.popover("삭제", use_container_width=True):
            st.write("삭제하시겠습니까?")
            if st.button("삭제", key=f"delete_photo_{photo.id}", type="primary"):
                try:
                    close_detail = delete_photo(
                        get_record_store(), session.email, photo.id, feed=feed, selected_id=photo_id
                    )
                except GantzError as e:
                    display_error(e)
                    if e.code == "photo_not_found":
                        st.session_state.pop(SELECTED_KEY, None)
                    return
                if close_detail:
                    st.session_state.pop(SELECTED_KEY, None)
                st.rerun()


def render_photo_grid(feed: PaginatedFeed[Photo]) -> None:
    cols = st.columns(GRID_COLUMNS)
    for i, photo in enumerate(feed.items):
        with cols[i % GRID_COLUMNS]:
            st.image(photo.image_url, use_container_width=True)
            if st.button("보기", key=f"open_photo_{photo.id}", use_container_width=True):
                st.session_state[SELECTED_KEY] = photo.id
                show_photo_dialog(photo.id)


def render_feed_footer(feed: PaginatedFeed[Photo]) -> None:
    """The bottom sentinel: loads the next page, or marks the end of the feed."""
    error = st.session_state.get(FEED_ERROR_KEY)
    if error and feed.last_error is not None:
        if render_loading_error(error, retry_key="photo_feed_retry"):
            st.session_state.pop(FEED_ERROR_KEY, None)
            with st.spinner("불러오는 중…"):
                feed.retry()
            st.rerun()
        return

    if feed.has_more:
        if st.button("더 보기", key="photo_feed_more", use_container_width=True):
            with st.spinner("불러오는 중…"):
                load_more_photos()
            st.rerun()
    elif feed.items:
        st.markdown(
            "<p style='text-align: center; color: #888;'>간츠의 이야기는 여기까지!</p>",
            unsafe_allow_html=True,
        )


def render_photos_page() -> None:
    """Render the photo gallery page."""
    st.markdown("## PHOTOS")

    session = current_session()
    feed = get_photo_feed(get_record_store())

    if session.is_admin:
        render_upload_panel(session, feed)

    if not feed.items:
        if feed.last_error is None:
            render_empty_state("아직 사진이 없어요.", icon="📷")
        render_feed_footer(feed)
        return

    render_photo_grid(feed)
    render_feed_footer(feed)
