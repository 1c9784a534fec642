"""
Unit tests for landing page activity.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from gantz.error_handling import DatabaseError
from gantz.services.activity import load_recent_activity, to_youtube_embed_url


class TestLoadRecentActivity:
    def test_collects_recent_photos_and_memos(self, store, admin):
        photo = store.insert_photo(admin, "https://cdn.example.com/a.jpg")
        memo = store.insert_memo(admin, "제목", "내용")

        activity = load_recent_activity(store)

        assert [p.id for p in activity.photos] == [photo.id]
        assert [m.id for m in activity.memos] == [memo.id]

    def test_since_is_seven_days_back(self):
        store = MagicMock()
        store.recent_photos.return_value = []
        store.recent_memos.return_value = []
        now = datetime(2025, 1, 8, tzinfo=UTC)

        activity = load_recent_activity(store, now=now)

        assert activity.since == now - timedelta(days=7)
        store.recent_photos.assert_called_once_with(activity.since, 30)
        store.recent_memos.assert_called_once_with(activity.since, 30)

    def test_one_failing_collection_keeps_the_other(self):
        store = MagicMock()
        store.recent_photos.side_effect = DatabaseError("photos unavailable")
        store.recent_memos.return_value = ["memo"]

        activity = load_recent_activity(store)

        assert activity.photos == []
        assert activity.memos == ["memo"]


class TestYoutubeEmbedUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://youtu.be/kuQ8kiBuFd4?si=afx3Gy9G_0rSwl5v", "https://www.youtube.com/embed/kuQ8kiBuFd4"),
            ("https://www.youtube.com/watch?v=kuQ8kiBuFd4&t=10", "https://www.youtube.com/embed/kuQ8kiBuFd4"),
            ("https://www.youtube.com/embed/kuQ8kiBuFd4", "https://www.youtube.com/embed/kuQ8kiBuFd4"),
            ("https://youtube.com/shorts/abc123", "https://www.youtube.com/embed/abc123"),
            ("https://vimeo.com/12345", None),
            ("not a url", None),
        ],
    )
    def test_conversion(self, url, expected):
        assert to_youtube_embed_url(url) == expected
