"""
Record store for gantz application.

Parameterized reads and single-record writes against the four DuckDB
collections. Every call either returns rows (possibly none) or raises
``DatabaseError`` with the store's own message, so "failed" and "empty" stay
distinct outcomes for the caller.

Admin-only writes are checked here by ``AccessPolicy``. The session gate only
decides what the pages show; this check is the one that rejects writes.
"""

import threading
import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar

import duckdb

from ..config import get_admin_email, get_database_path
from ..error_handling import AuthorizationError, DatabaseError, ValidationError
from ..logging_config import get_logger, log_performance, log_user_action
from ..models.database import DatabaseManager, get_database_manager
from ..models.memo import Comment, Memo
from ..models.person import Person, PersonDraft, extras_to_json
from ..models.photo import Photo
from ..models.timestamps import to_storage

logger = get_logger(__name__)

T = TypeVar("T")

ANONYMOUS_ACTOR = "anonymous"


class AccessPolicy:
    """Store-side write rules: one admin identity, exact match."""

    def __init__(self, admin_email: str):
        self.admin_email = admin_email

    def is_admin(self, actor: str | None) -> bool:
        return actor is not None and actor == self.admin_email

    def require_admin(self, actor: str | None, operation: str) -> None:
        """
        Raises:
            AuthorizationError: If ``actor`` is not the admin
        """
        if not self.is_admin(actor):
            raise AuthorizationError(
                f"Operation '{operation}' requires the admin account",
                code="admin_required",
                details={"operation": operation, "actor": actor or ANONYMOUS_ACTOR},
            )


FAILURE_LABELS = {
    "insert": "저장",
    "update": "수정",
    "delete": "삭제",
}


def _failure_label(operation: str) -> str:
    """Korean verb for the operation named in a failure message; reads are 불러오기."""
    return FAILURE_LABELS.get(operation.split("_", 1)[0], "불러오기")


def _column_list(columns: tuple[str, ...]) -> str:
    return ", ".join(columns)


class RecordStore:
    """Query/mutation interface to photos, memos, memo_comments and people."""

    def __init__(self, db_manager: DatabaseManager, policy: AccessPolicy):
        self.db_manager = db_manager
        self.policy = policy
        self._lock = threading.RLock()
        self._last_timestamp: datetime | None = None

    # Internals

    def _next_timestamp(self) -> datetime:
        """Store-assigned creation time, strictly increasing per insert."""
        with self._lock:
            now = datetime.now(UTC)
            if self._last_timestamp is not None and now <= self._last_timestamp:
                now = self._last_timestamp + timedelta(microseconds=1)
            self._last_timestamp = now
            return now

    def _run(self, operation: str, work: Callable[[DatabaseManager], T], **context: Any) -> T:
        """Execute ``work`` on a fresh connection, translating store failures."""
        start = time.perf_counter()
        with self._lock:
            try:
                with self.db_manager as db:
                    result = work(db)
            except duckdb.Error as e:
                raise DatabaseError(
                    str(e),
                    code=f"{operation}_failed",
                    user_message=f"{_failure_label(operation)} 실패: {e}",
                    details={"operation": operation, **context},
                    original_exception=e,
                ) from e
        log_performance(operation, time.perf_counter() - start, **context)
        return result

    @staticmethod
    def _require_text(value: str | None, field: str, user_message: str) -> str:
        text = (value or "").strip()
        if not text:
            raise ValidationError(f"Field '{field}' is required", code=f"{field}_required", user_message=user_message)
        return text

    # Photos

    def select_photos(self, start: int, end: int) -> list[Photo]:
        """
        Read photos newest-first within an inclusive row range.

        Args:
            start: First row index (0-based)
            end: Last row index, inclusive

        Returns:
            list: Up to ``end - start + 1`` photos
        """
        if start < 0 or end < start:
            return []
        query = (
            f"SELECT {_column_list(Photo.COLUMNS)} FROM photos "
            "ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        )
        rows = self._run(
            "select_photos",
            lambda db: db.execute_query(query, [end - start + 1, start]),
            start=start,
            end=end,
        )
        return [Photo.from_row(row) for row in rows]

    def recent_photos(self, since: datetime, limit: int = 30) -> list[Photo]:
        """Photos created at or after ``since``, newest first."""
        query = (
            f"SELECT {_column_list(Photo.COLUMNS)} FROM photos "
            "WHERE created_at >= ? ORDER BY created_at DESC, id DESC LIMIT ?"
        )
        rows = self._run("recent_photos", lambda db: db.execute_query(query, [to_storage(since), limit]))
        return [Photo.from_row(row) for row in rows]

    def get_photo(self, photo_id: str) -> Photo | None:
        query = f"SELECT {_column_list(Photo.COLUMNS)} FROM photos WHERE id = ?"
        rows = self._run("get_photo", lambda db: db.execute_query(query, [photo_id]), photo_id=photo_id)
        return Photo.from_row(rows[0]) if rows else None

    def insert_photo(
        self, actor: str | None, image_url: str, caption: str = "", taken_at: datetime | None = None
    ) -> Photo:
        self.policy.require_admin(actor, "insert_photo")
        if not image_url:
            raise ValidationError("Photo image URL is required", code="image_url_required")

        photo = Photo(
            id=str(uuid.uuid4()),
            image_url=image_url,
            caption=caption,
            taken_at=taken_at,
            created_at=self._next_timestamp(),
        )
        self._run(
            "insert_photo",
            lambda db: db.execute_query(
                "INSERT INTO photos (id, image_url, caption, taken_at, created_at) VALUES (?, ?, ?, ?, ?)",
                [photo.id, photo.image_url, photo.caption, to_storage(photo.taken_at), to_storage(photo.created_at)],
            ),
            photo_id=photo.id,
        )
        log_user_action(actor or ANONYMOUS_ACTOR, "photo_created", photo_id=photo.id)
        return photo

    def update_photo_caption(self, actor: str | None, photo_id: str, caption: str) -> bool:
        """
        Replace a photo's caption.

        Returns:
            bool: False if no photo has ``photo_id``
        """
        self.policy.require_admin(actor, "update_photo_caption")
        rows = self._run(
            "update_photo_caption",
            lambda db: db.execute_query("UPDATE photos SET caption = ? WHERE id = ? RETURNING id", [caption, photo_id]),
            photo_id=photo_id,
        )
        if rows:
            log_user_action(actor or ANONYMOUS_ACTOR, "photo_caption_updated", photo_id=photo_id)
        return bool(rows)

    def delete_photo(self, actor: str | None, photo_id: str) -> bool:
        self.policy.require_admin(actor, "delete_photo")
        rows = self._run(
            "delete_photo",
            lambda db: db.execute_query("DELETE FROM photos WHERE id = ? RETURNING id", [photo_id]),
            photo_id=photo_id,
        )
        if rows:
            log_user_action(actor or ANONYMOUS_ACTOR, "photo_deleted", photo_id=photo_id)
        else:
            logger.warning("photo_not_found_for_deletion", photo_id=photo_id)
        return bool(rows)

    # Memos

    def list_memos(self) -> list[Memo]:
        query = f"SELECT {_column_list(Memo.COLUMNS)} FROM memos ORDER BY created_at DESC, id DESC"
        rows = self._run("list_memos", lambda db: db.execute_query(query))
        return [Memo.from_row(row) for row in rows]

    def recent_memos(self, since: datetime, limit: int = 30) -> list[Memo]:
        query = (
            f"SELECT {_column_list(Memo.COLUMNS)} FROM memos "
            "WHERE created_at >= ? ORDER BY created_at DESC, id DESC LIMIT ?"
        )
        rows = self._run("recent_memos", lambda db: db.execute_query(query, [to_storage(since), limit]))
        return [Memo.from_row(row) for row in rows]

    def get_memo(self, memo_id: str) -> Memo | None:
        query = f"SELECT {_column_list(Memo.COLUMNS)} FROM memos WHERE id = ?"
        rows = self._run("get_memo", lambda db: db.execute_query(query, [memo_id]), memo_id=memo_id)
        return Memo.from_row(rows[0]) if rows else None

    def insert_memo(self, actor: str | None, title: str, body: str) -> Memo:
        self.policy.require_admin(actor, "insert_memo")
        message = "내용까지 다 입력해 주세요."
        memo = Memo(
            id=str(uuid.uuid4()),
            created_at=self._next_timestamp(),
            title=self._require_text(title, "title", message),
            body=self._require_text(body, "body", message),
        )
        self._run(
            "insert_memo",
            lambda db: db.execute_query(
                "INSERT INTO memos (id, created_at, title, body) VALUES (?, ?, ?, ?)",
                [memo.id, to_storage(memo.created_at), memo.title, memo.body],
            ),
            memo_id=memo.id,
        )
        log_user_action(actor or ANONYMOUS_ACTOR, "memo_created", memo_id=memo.id)
        return memo

    def delete_memo(self, actor: str | None, memo_id: str) -> bool:
        """Delete a memo together with its comments in one transaction."""
        self.policy.require_admin(actor, "delete_memo")

        def work(db: DatabaseManager) -> list[tuple]:
            with db.transaction():
                db.execute_query("DELETE FROM memo_comments WHERE memo_id = ?", [memo_id])
                return db.execute_query("DELETE FROM memos WHERE id = ? RETURNING id", [memo_id])

        rows = self._run("delete_memo", work, memo_id=memo_id)
        if rows:
            log_user_action(actor or ANONYMOUS_ACTOR, "memo_deleted", memo_id=memo_id)
        return bool(rows)

    # Comments

    def list_comments(self, memo_id: str) -> list[Comment]:
        """Comments of one memo in posting order (oldest first)."""
        query = (
            f"SELECT {_column_list(Comment.COLUMNS)} FROM memo_comments "
            "WHERE memo_id = ? ORDER BY created_at ASC, id ASC"
        )
        rows = self._run("list_comments", lambda db: db.execute_query(query, [memo_id]), memo_id=memo_id)
        return [Comment.from_row(row) for row in rows]

    def insert_comment(self, memo_id: str, body: str, nickname: str | None = None) -> Comment:
        """
        Post a comment. Open to every viewer, signed in or not.

        Raises:
            ValidationError: If the body is blank or the memo does not exist
        """
        text = self._require_text(body, "body", "간츠에게 하고 싶은 말이 있나요?")
        nickname = (nickname or "").strip() or None
        comment = Comment(
            id=str(uuid.uuid4()),
            created_at=self._next_timestamp(),
            memo_id=memo_id,
            nickname=nickname,
            body=text,
        )

        def work(db: DatabaseManager) -> bool:
            with db.transaction():
                if not db.execute_query("SELECT id FROM memos WHERE id = ?", [memo_id]):
                    return False
                db.execute_query(
                    "INSERT INTO memo_comments (id, created_at, memo_id, nickname, body) VALUES (?, ?, ?, ?, ?)",
                    [comment.id, to_storage(comment.created_at), comment.memo_id, comment.nickname, comment.body],
                )
                return True

        if not self._run("insert_comment", work, memo_id=memo_id):
            raise ValidationError(
                f"Memo not found: {memo_id}",
                code="memo_not_found",
                user_message="삭제된 메모입니다.",
                details={"memo_id": memo_id},
            )
        log_user_action(nickname or ANONYMOUS_ACTOR, "comment_posted", memo_id=memo_id, comment_id=comment.id)
        return comment

    def delete_comment(self, actor: str | None, comment_id: str) -> bool:
        self.policy.require_admin(actor, "delete_comment")
        rows = self._run(
            "delete_comment",
            lambda db: db.execute_query("DELETE FROM memo_comments WHERE id = ? RETURNING id", [comment_id]),
            comment_id=comment_id,
        )
        if rows:
            log_user_action(actor or ANONYMOUS_ACTOR, "comment_deleted", comment_id=comment_id)
        return bool(rows)

    # People

    def list_people(self) -> list[Person]:
        query = f"SELECT {_column_list(Person.COLUMNS)} FROM people ORDER BY created_at ASC, id ASC"
        rows = self._run("list_people", lambda db: db.execute_query(query))
        return [Person.from_row(row) for row in rows]

    def get_person(self, person_id: str) -> Person | None:
        query = f"SELECT {_column_list(Person.COLUMNS)} FROM people WHERE id = ?"
        rows = self._run("get_person", lambda db: db.execute_query(query, [person_id]), person_id=person_id)
        return Person.from_row(rows[0]) if rows else None

    def insert_person(self, actor: str | None, draft: PersonDraft) -> Person:
        self.policy.require_admin(actor, "insert_person")
        clean = draft.normalized()
        person = Person(
            id=str(uuid.uuid4()),
            created_at=self._next_timestamp(),
            name=clean.name,
            mbti=clean.mbti,
            bio=clean.bio,
            avatar_url=clean.avatar_url,
            extras=clean.extras,
        )
        self._run(
            "insert_person",
            lambda db: db.execute_query(
                "INSERT INTO people (id, created_at, name, mbti, bio, avatar_url, extras) VALUES (?, ?, ?, ?, ?, ?, ?)",
                [
                    person.id,
                    to_storage(person.created_at),
                    person.name,
                    person.mbti,
                    person.bio,
                    person.avatar_url,
                    extras_to_json(person.extras),
                ],
            ),
            person_id=person.id,
        )
        log_user_action(actor or ANONYMOUS_ACTOR, "person_created", person_id=person.id)
        return person

    def update_person(self, actor: str | None, person_id: str, draft: PersonDraft) -> bool:
        self.policy.require_admin(actor, "update_person")
        clean = draft.normalized()
        rows = self._run(
            "update_person",
            lambda db: db.execute_query(
                "UPDATE people SET name = ?, mbti = ?, bio = ?, avatar_url = ?, extras = ? WHERE id = ? RETURNING id",
                [clean.name, clean.mbti, clean.bio, clean.avatar_url, extras_to_json(clean.extras), person_id],
            ),
            person_id=person_id,
        )
        if rows:
            log_user_action(actor or ANONYMOUS_ACTOR, "person_updated", person_id=person_id)
        return bool(rows)

    def delete_person(self, actor: str | None, person_id: str) -> bool:
        self.policy.require_admin(actor, "delete_person")
        rows = self._run(
            "delete_person",
            lambda db: db.execute_query("DELETE FROM people WHERE id = ? RETURNING id", [person_id]),
            person_id=person_id,
        )
        if rows:
            log_user_action(actor or ANONYMOUS_ACTOR, "person_deleted", person_id=person_id)
        return bool(rows)


# Global record store instance
_record_store: RecordStore | None = None
_record_store_lock = threading.Lock()


def get_record_store() -> RecordStore:
    """Get the process-wide record store, creating the database on first use."""
    global _record_store
    if _record_store is None:
        with _record_store_lock:
            if _record_store is None:
                db_manager = get_database_manager(get_database_path())
                _record_store = RecordStore(db_manager, AccessPolicy(get_admin_email()))
    return _record_store
