"""Memo board models: admin-written memos and visitor comments."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from .timestamps import ensure_utc

ANONYMOUS_NICKNAME = "익명"


@dataclass
class Memo:
    """A memo posted by the admin. Memos have no update path."""

    COLUMNS: ClassVar[tuple[str, ...]] = ("id", "created_at", "title", "body")

    id: str
    created_at: datetime
    title: str
    body: str

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> "Memo":
        return cls(id=row[0], created_at=ensure_utc(row[1]), title=row[2], body=row[3])  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "title": self.title,
            "body": self.body,
        }


@dataclass
class Comment:
    """A visitor comment on a memo. ``nickname`` is None when left blank."""

    COLUMNS: ClassVar[tuple[str, ...]] = ("id", "created_at", "memo_id", "nickname", "body")

    id: str
    created_at: datetime
    memo_id: str
    nickname: str | None
    body: str

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> "Comment":
        return cls(
            id=row[0],
            created_at=ensure_utc(row[1]),  # type: ignore[arg-type]
            memo_id=row[2],
            nickname=row[3],
            body=row[4],
        )

    @property
    def display_nickname(self) -> str:
        """Name shown next to the comment."""
        return self.nickname if self.nickname is not None else ANONYMOUS_NICKNAME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "memo_id": self.memo_id,
            "nickname": self.nickname,
            "body": self.body,
        }
