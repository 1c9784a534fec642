"""People directory: cards, profile dialog and admin editor."""

from typing import Any

import streamlit as st

from ...error_handling import GantzError
from ...logging_config import get_logger
from ...models.person import Person, PersonDraft, extras_to_rows, rows_to_extras
from ...services.image_processor import get_image_processor
from ...services.records import get_record_store
from ...services.session import SessionState
from ..components.common import render_empty_state
from ..components.error_display import display_error
from ..handlers.people import create_person, delete_person, save_person
from ..handlers.session import current_session

logger = get_logger(__name__)

CARD_COLUMNS = 4
AVATAR_TYPES = ["jpg", "jpeg", "png", "gif", "webp"]
EXTRAS_COLUMNS = {
    "key": st.column_config.TextColumn("항목"),
    "value": st.column_config.TextColumn("내용"),
}


def _editor_rows(edited: Any) -> list[dict[str, Any]]:
    if hasattr(edited, "to_dict"):
        return edited.to_dict("records")
    return list(edited)


def render_extras_editor(key: str, person: Person | None = None) -> list[dict[str, Any]]:
    """Key/value rows editor; blank keys are ignored on save."""
    rows = extras_to_rows(person.extras) if person else []
    if not rows:
        rows = [{"key": "", "value": ""}]
    edited = st.data_editor(
        rows,
        key=key,
        num_rows="dynamic",
        column_config=EXTRAS_COLUMNS,
        use_container_width=True,
        hide_index=True,
    )
    return _editor_rows(edited)


def render_avatar(person: Person, width: int = 120) -> None:
    if person.avatar_url:
        st.image(person.avatar_url, width=width)
    else:
        st.markdown(f"<div style='font-size: {width // 2}px;'>👤</div>", unsafe_allow_html=True)


def render_create_form(session: SessionState) -> None:
    with st.expander("카드 추가", expanded=False):
        with st.form("person_create_form", clear_on_submit=True):
            name = st.text_input("이름", placeholder="이름(필수)")
            mbti = st.text_input("MBTI", placeholder="MBTI(선택)")
            bio = st.text_area("소개", placeholder="소개(선택)")
            avatar_file = st.file_uploader("사진", type=AVATAR_TYPES)
            st.markdown("**추가 정보**")
            rows = render_extras_editor("person_create_extras")
            submitted = st.form_submit_button("추가", type="primary")

        if not submitted:
            return

        try:
            draft = PersonDraft(name=name, mbti=mbti, bio=bio, extras=rows_to_extras(rows))
            person = create_person(
                get_record_store(), None, get_image_processor(),
                session.email, draft, avatar_file,
            )
        except GantzError as e:
            display_error(e)
            return

        logger.info("person_card_added", person_id=person.id)
        st.toast("추가 완료")


@st.dialog("사람 편집", width="large")
def show_edit_dialog(person: Person) -> None:
    session = current_session()
    if not session.is_admin:
        st.warning("관리자만 저장 가능")
        return

    with st.form(f"person_edit_form_{person.id}"):
        name = st.text_input("이름", value=person.name, placeholder="이름(필수)")
        mbti = st.text_input("MBTI", value=person.mbti or "", placeholder="MBTI(선택)")
        bio = st.text_area("소개", value=person.bio or "", placeholder="소개(선택)")
        render_avatar(person, width=80)
        avatar_file = st.file_uploader("사진 변경", type=AVATAR_TYPES)
        st.markdown("**추가 정보**")
        rows = render_extras_editor(f"person_edit_extras_{person.id}", person)
        submitted = st.form_submit_button("저장", type="primary")

    if not submitted:
        return

    try:
        draft = PersonDraft(
            name=name, mbti=mbti, bio=bio, avatar_url=person.avatar_url, extras=rows_to_extras(rows)
        )
        saved = save_person(
            get_record_store(), None, get_image_processor(),
            session.email, person.id, draft, avatar_file,
        )
    except GantzError as e:
        display_error(e)
        return

    if not saved:
        st.info("이미 삭제된 카드입니다.")
        return
    st.rerun()


@st.dialog("기본 정보", width="large")
def show_person_dialog(person: Person) -> None:
    session = current_session()

    col1, col2 = st.columns([1, 2])
    with col1:
        render_avatar(person, width=160)
    with col2:
        st.markdown(f"### {person.name}")
        if person.mbti:
            st.markdown(f"**MBTI** {person.mbti}")
        if person.bio:
            st.write(person.bio)

    st.markdown("**추가 정보**")
    if person.extras:
        for key, value in person.extras:
            st.markdown(f"- **{key}**: {value}")
    else:
        st.caption("추가 정보 없음.")

    if session.is_admin:
        with st.popover("삭제"):
            st.write("삭제하시겠습니까?")
            if st.button("삭제", key=f"delete_person_{person.id}", type="primary"):
                try:
                    delete_person(get_record_store(), session.email, person.id)
                except GantzError as e:
                    display_error(e)
                    return
                st.rerun()


def render_person_card(session: SessionState, person: Person) -> None:
    with st.container(border=True):
        render_avatar(person)
        st.markdown(f"**{person.name}**")
        if person.mbti:
            st.caption(person.mbti)
        if st.button("보기", key=f"open_person_{person.id}", use_container_width=True):
            show_person_dialog(person)
        if session.is_admin and st.button("편집", key=f"edit_person_{person.id}", use_container_width=True):
            show_edit_dialog(person)


def render_people_page() -> None:
    """Render the people directory."""
    st.markdown("## 기본 정보")

    session = current_session()
    if session.is_admin:
        render_create_form(session)

    try:
        with st.spinner("불러오는 중…"):
            people = get_record_store().list_people()
    except GantzError as e:
        display_error(e)
        return

    if not people:
        render_empty_state("아직 등록된 사람이 없어요.", icon="🕵️")
        return

    cols = st.columns(CARD_COLUMNS)
    for i, person in enumerate(people):
        with cols[i % CARD_COLUMNS]:
            render_person_card(session, person)
