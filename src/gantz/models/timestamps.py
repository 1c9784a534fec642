"""Timestamp helpers shared by the record models.

DuckDB ``TIMESTAMP`` columns hold naive UTC values; models always expose
timezone-aware UTC datetimes.
"""

from datetime import UTC, datetime


def ensure_utc(value: datetime | str | None) -> datetime | None:
    """Coerce a stored or serialized timestamp into an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, str):
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_storage(value: datetime | None) -> datetime | None:
    """Convert an aware datetime into the naive UTC form stored in DuckDB."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
