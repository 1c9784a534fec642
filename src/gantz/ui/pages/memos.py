"""Memo board with anonymous comments."""

import streamlit as st

from ...error_handling import GantzError
from ...logging_config import get_logger
from ...models.memo import Memo
from ...services.records import get_record_store
from ...services.session import SessionState
from ..components.common import format_timestamp, render_empty_state
from ..components.error_display import display_error
from ..handlers.memos import create_memo, delete_comment, delete_memo, load_comments, post_comment
from ..handlers.session import current_session

logger = get_logger(__name__)


def render_memo_form(session: SessionState) -> None:
    with st.expander("글 작성", expanded=False):
        with st.form("memo_form", clear_on_submit=True):
            title = st.text_input("제목", placeholder="제목")
            body = st.text_area("내용", placeholder="내용", height=160)
            submitted = st.form_submit_button("작성", type="primary")

        if submitted:
            try:
                create_memo(get_record_store(), session.email, title, body)
                st.toast("작성 완료")
            except GantzError as e:
                display_error(e)


def render_comments(session: SessionState, memo: Memo) -> None:
    st.markdown("### 댓글")

    store = get_record_store()
    try:
        with st.spinner("댓글 불러오는 중…"):
            comments = load_comments(store, [memo.id])[memo.id]
    except GantzError as e:
        display_error(e)
        return

    if not comments:
        st.caption("아직 댓글이 없어요.")

    for comment in comments:
        with st.container(border=True):
            st.markdown(f"**{comment.display_nickname}** · {format_timestamp(comment.created_at)}")
            st.write(comment.body)
            if session.is_admin and st.button("삭제", key=f"delete_comment_{comment.id}"):
                try:
                    delete_comment(store, session.email, comment.id)
                    st.rerun(scope="fragment")
                except GantzError as e:
                    display_error(e)

    with st.form(f"comment_form_{memo.id}", clear_on_submit=True):
        nickname = st.text_input("닉네임(선택)", placeholder="익명")
        body = st.text_area("댓글", placeholder="간츠에게 하고 싶은 말이 있나요?")
        submitted = st.form_submit_button("댓글 등록")

    if submitted:
        try:
            post_comment(store, memo.id, body, nickname)
            st.rerun(scope="fragment")
        except GantzError as e:
            display_error(e)


@st.dialog("메모", width="large")
def show_memo_dialog(memo: Memo) -> None:
    session = current_session()

    st.markdown(f"## {memo.title}")
    st.caption(format_timestamp(memo.created_at))
    st.write(memo.body)

    if session.is_admin:
        with st.popover("메모 삭제"):
            st.write("삭제하시겠습니까?")
            if st.button("삭제", key=f"delete_memo_{memo.id}", type="primary"):
                try:
                    delete_memo(get_record_store(), session.email, memo.id)
                except GantzError as e:
                    display_error(e)
                    return
                st.rerun()

    st.divider()
    render_comments(session, memo)


def render_memos_page() -> None:
    """Render the memo board."""
    st.markdown("## 메모")

    session = current_session()
    if session.is_admin:
        render_memo_form(session)

    try:
        memos = get_record_store().list_memos()
    except GantzError as e:
        display_error(e)
        return

    if not memos:
        render_empty_state("아직 메모가 없어요.", icon="📝")
        return

    for memo in memos:
        with st.container(border=True):
            col1, col2 = st.columns([4, 1])
            with col1:
                st.markdown(f"**{memo.title}**")
                st.caption(format_timestamp(memo.created_at))
            with col2:
                if st.button("열기", key=f"open_memo_{memo.id}", use_container_width=True):
                    show_memo_dialog(memo)
