"""Memo board actions."""

from ...error_handling import ValidationError
from ...models.memo import Comment, Memo
from ...services.records import RecordStore


def create_memo(store: RecordStore, actor: str | None, title: str, body: str) -> Memo:
    return store.insert_memo(actor, title, body)


def delete_memo(store: RecordStore, actor: str | None, memo_id: str) -> bool:
    """Delete a memo together with its comments."""
    return store.delete_memo(actor, memo_id)


def post_comment(store: RecordStore, memo_id: str, body: str, nickname: str | None = None) -> Comment:
    """
    Add a comment; anyone may post, with or without a nickname.

    Raises:
        ValidationError: If the body is blank or the memo is gone
    """
    if not (body or "").strip():
        raise ValidationError("Comment body is empty", code="comment_body_required", user_message="댓글 내용을 입력해 주세요.")
    return store.insert_comment(memo_id, body.strip(), nickname)


def delete_comment(store: RecordStore, actor: str | None, comment_id: str) -> bool:
    return store.delete_comment(actor, comment_id)


def load_comments(store: RecordStore, memo_ids: list[str]) -> dict[str, list[Comment]]:
    """Comments of each memo, oldest first."""
    return {memo_id: store.list_comments(memo_id) for memo_id in memo_ids}
