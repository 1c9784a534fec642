"""Landing page data: the last week of photos and memos, and the video embed."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs, urlparse

from ..error_handling import GantzError
from ..logging_config import get_logger
from ..models.memo import Memo
from ..models.photo import Photo
from .records import RecordStore

logger = get_logger(__name__)

RECENT_DAYS = 7
RECENT_LIMIT = 30
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"


@dataclass
class RecentActivity:
    photos: list[Photo] = field(default_factory=list)
    memos: list[Memo] = field(default_factory=list)
    since: datetime | None = None


def load_recent_activity(
    store: RecordStore, days: int = RECENT_DAYS, limit: int = RECENT_LIMIT, now: datetime | None = None
) -> RecentActivity:
    """
    Collect photos and memos created in the last ``days`` days, newest first.

    A failure in one collection is logged and leaves that list empty; the
    other collection is still shown.
    """
    since = (now or datetime.now(UTC)) - timedelta(days=days)
    activity = RecentActivity(since=since)

    try:
        activity.photos = store.recent_photos(since, limit)
    except GantzError as e:
        logger.warning("recent_photos_failed", error=str(e))

    try:
        activity.memos = store.recent_memos(since, limit)
    except GantzError as e:
        logger.warning("recent_memos_failed", error=str(e))

    return activity


def to_youtube_embed_url(url: str) -> str | None:
    """
    Convert a YouTube share/watch/shorts/embed link into an embed URL.

    Returns:
        str | None: Embed URL, or None if the link is not recognised
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = parsed.hostname or ""
    path = parsed.path

    if "youtu.be" in host:
        video_id = path.lstrip("/").split("/")[0]
        return f"{YOUTUBE_EMBED_BASE}{video_id}" if video_id else None

    if "youtube.com" in host:
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        if video_id:
            return f"{YOUTUBE_EMBED_BASE}{video_id}"
        if path.startswith("/embed/"):
            return f"https://www.youtube.com{path}"
        if path.startswith("/shorts/"):
            video_id = path[len("/shorts/"):].split("/")[0]
            return f"{YOUTUBE_EMBED_BASE}{video_id}" if video_id else None

    return None
