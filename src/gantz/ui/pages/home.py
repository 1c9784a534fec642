"""Landing page: last seven days of photos and memos, the video, and links."""

import streamlit as st
import streamlit.components.v1 as components

from ...config import get_home_links, get_home_video_url
from ...logging_config import get_logger
from ...services.activity import RECENT_DAYS, load_recent_activity, to_youtube_embed_url
from ...services.records import get_record_store
from ..components.common import format_timestamp, navigate_to, render_empty_state

logger = get_logger(__name__)


def render_video() -> None:
    url = get_home_video_url()
    embed_url = to_youtube_embed_url(url)
    if embed_url is None:
        logger.warning("home_video_not_embeddable", url=url)
        st.video(url)
        return
    components.iframe(embed_url, height=400)


def render_links() -> None:
    links = get_home_links()
    if not links:
        return
    cols = st.columns(len(links))
    for col, (label, url) in zip(cols, links, strict=True):
        with col:
            st.link_button(label, url, use_container_width=True)


def render_recent_photos(photos: list) -> None:
    st.subheader("사진")
    if not photos:
        render_empty_state(f"최근 {RECENT_DAYS}일 사진이 없어.", icon="📷")
        return
    cols = st.columns(4)
    for i, photo in enumerate(photos):
        with cols[i % 4]:
            st.image(photo.image_url, caption=photo.caption or None, use_container_width=True)
    if st.button("사진 더 보기", key="home_more_photos"):
        navigate_to("photos")


def render_recent_memos(memos: list) -> None:
    st.subheader("메모")
    if not memos:
        render_empty_state(f"최근 {RECENT_DAYS}일 메모가 없어.", icon="📝")
        return
    for memo in memos:
        with st.container(border=True):
            st.markdown(f"**{memo.title}**")
            st.caption(format_timestamp(memo.created_at))
    if st.button("메모 더 보기", key="home_more_memos"):
        navigate_to("memos")


def render_home_page() -> None:
    """Render the landing page."""
    st.markdown("<h1 style='text-align: center;'>GANTZ</h1>", unsafe_allow_html=True)

    render_video()
    render_links()

    st.divider()
    st.markdown(f"### 최근 {RECENT_DAYS}일")

    with st.spinner("불러오는 중…"):
        activity = load_recent_activity(get_record_store())

    col1, col2 = st.columns(2)
    with col1:
        render_recent_photos(activity.photos)
    with col2:
        render_recent_memos(activity.memos)
