"""
People directory models.

A person's extras are an ordered list of ``(key, value)`` text pairs rather
than a free-form map: keys are trimmed, rows with a blank key are dropped and
the remaining keys must be unique. The list is stored as a JSON array of
two-element arrays so the order survives a round trip.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

from ..error_handling import ValidationError
from .timestamps import ensure_utc

ExtraField = tuple[str, str]


def normalize_extras(pairs: Iterable[tuple[Any, Any]]) -> list[ExtraField]:
    """
    Validate and normalize extras pairs.

    Args:
        pairs: (key, value) pairs in display order

    Returns:
        list: pairs with trimmed keys, blank keys removed, values as text

    Raises:
        ValidationError: If two rows share the same key
    """
    normalized: list[ExtraField] = []
    seen: set[str] = set()
    for key, value in pairs:
        key_text = str(key or "").strip()
        if not key_text:
            continue
        if key_text in seen:
            raise ValidationError(
                f"Duplicate extras key: {key_text}",
                code="duplicate_extras_key",
                user_message=f"'{key_text}' 항목이 중복되었습니다.",
                details={"key": key_text},
            )
        seen.add(key_text)
        normalized.append((key_text, "" if value is None else str(value)))
    return normalized


def extras_to_json(extras: list[ExtraField]) -> str:
    return json.dumps([[key, value] for key, value in extras], ensure_ascii=False)


def extras_from_json(raw: str | None) -> list[ExtraField]:
    """Decode stored extras. Object-shaped legacy values keep their key order."""
    if not raw:
        return []
    data = json.loads(raw)
    if isinstance(data, Mapping):
        return normalize_extras(data.items())
    return normalize_extras((item[0], item[1]) for item in data)


def extras_to_rows(extras: list[ExtraField]) -> list[dict[str, str]]:
    """Convert extras into editable ``{"key", "value"}`` rows."""
    return [{"key": key, "value": value} for key, value in extras]


def rows_to_extras(rows: Iterable[Mapping[str, Any]]) -> list[ExtraField]:
    """Convert editor rows back into validated extras."""
    return normalize_extras((row.get("key"), row.get("value")) for row in rows)


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Person:
    """A directory card."""

    COLUMNS: ClassVar[tuple[str, ...]] = ("id", "created_at", "name", "mbti", "bio", "avatar_url", "extras")

    id: str
    created_at: datetime
    name: str
    mbti: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    extras: list[ExtraField] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> "Person":
        return cls(
            id=row[0],
            created_at=ensure_utc(row[1]),  # type: ignore[arg-type]
            name=row[2],
            mbti=row[3],
            bio=row[4],
            avatar_url=row[5],
            extras=extras_from_json(row[6]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "name": self.name,
            "mbti": self.mbti,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "extras": [list(pair) for pair in self.extras],
        }

    def to_draft(self) -> "PersonDraft":
        """Editable copy of this person's fields."""
        return PersonDraft(
            name=self.name,
            mbti=self.mbti,
            bio=self.bio,
            avatar_url=self.avatar_url,
            extras=list(self.extras),
        )


@dataclass
class PersonDraft:
    """Fields submitted from the create/edit forms."""

    name: str
    mbti: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    extras: list[ExtraField] = field(default_factory=list)

    def normalized(self) -> "PersonDraft":
        """
        Trim text fields and validate.

        Raises:
            ValidationError: If the name is blank or extras keys collide
        """
        name = (self.name or "").strip()
        if not name:
            raise ValidationError(
                "Person name is required",
                code="name_required",
                user_message="이름은 꼭 넣어 주세용.",
            )
        return PersonDraft(
            name=name,
            mbti=_optional_text(self.mbti),
            bio=_optional_text(self.bio),
            avatar_url=self.avatar_url or None,
            extras=normalize_extras(self.extras),
        )
