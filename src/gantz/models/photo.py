"""
Photo record model for gantz application.

A photo is created by an admin upload: the file goes to the media bucket
first and only the resulting public URL is persisted here.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from .timestamps import ensure_utc, isoformat_or_none


@dataclass
class Photo:
    """A gallery photo as stored in the ``photos`` collection."""

    COLUMNS: ClassVar[tuple[str, ...]] = ("id", "image_url", "caption", "taken_at", "created_at")

    id: str
    image_url: str
    caption: str | None
    taken_at: datetime | None
    created_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> "Photo":
        """Build a Photo from a row selected in ``COLUMNS`` order."""
        return cls(
            id=row[0],
            image_url=row[1],
            caption=row[2],
            taken_at=ensure_utc(row[3]),
            created_at=ensure_utc(row[4]),  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "image_url": self.image_url,
            "caption": self.caption,
            "taken_at": isoformat_or_none(self.taken_at),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Photo":
        return cls(
            id=data["id"],
            image_url=data["image_url"],
            caption=data.get("caption"),
            taken_at=ensure_utc(data.get("taken_at")),
            created_at=ensure_utc(data["created_at"]),  # type: ignore[arg-type]
        )

    def with_caption(self, caption: str) -> "Photo":
        """Return a copy with a new caption; the image URL never changes."""
        return Photo(
            id=self.id,
            image_url=self.image_url,
            caption=caption,
            taken_at=self.taken_at,
            created_at=self.created_at,
        )
