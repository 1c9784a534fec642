"""
Unit tests for the paginated feed controller.
"""

from unittest.mock import MagicMock

import pytest

from gantz.services.feed import PaginatedFeed, SentinelObserver


class RangeSource:
    """In-memory newest-first collection answering inclusive range reads."""

    def __init__(self, total: int):
        self.records = list(range(total))
        self.calls: list[tuple[int, int]] = []

    def __call__(self, start: int, end: int) -> list[int]:
        self.calls.append((start, end))
        return self.records[start : end + 1]


class TestPaginatedFeed:
    """Test cases for PaginatedFeed."""

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            PaginatedFeed(RangeSource(3), page_size=0)

    def test_page_range_is_inclusive(self):
        feed = PaginatedFeed(RangeSource(0), page_size=24)

        assert feed.page_range(0) == (0, 23)
        assert feed.page_range(2) == (48, 71)

    @pytest.mark.parametrize(
        "total,page_size",
        [(0, 24), (10, 24), (24, 24), (50, 24), (48, 24), (7, 3), (9, 3), (1, 1)],
    )
    def test_accumulates_min_of_total_and_loaded_pages(self, total, page_size):
        source = RangeSource(total)
        feed = PaginatedFeed(source, page_size=page_size)

        assert feed.load_page(reset=True)
        successful = 1
        assert len(feed.items) == min(total, successful * page_size)

        while feed.has_more:
            assert feed.load_page()
            successful += 1
            assert len(feed.items) == min(total, successful * page_size)

        assert feed.items == source.records

    def test_exhausted_exactly_at_short_batch(self):
        source = RangeSource(48)
        feed = PaginatedFeed(source, page_size=24)

        feed.load_page(reset=True)
        assert feed.has_more is True
        feed.load_page()
        # A full second page cannot prove the end was reached
        assert feed.has_more is True
        feed.load_page()
        assert feed.has_more is False
        assert len(feed.items) == 48
        assert source.calls == [(0, 23), (24, 47), (48, 71)]

    def test_short_first_page_exhausts(self):
        feed = PaginatedFeed(RangeSource(10), page_size=24)

        feed.load_page(reset=True)

        assert feed.has_more is False
        assert feed.page == 1

    def test_load_after_exhaustion_is_noop(self):
        source = RangeSource(5)
        feed = PaginatedFeed(source, page_size=24)
        feed.load_page(reset=True)

        assert feed.load_page() is False
        assert len(source.calls) == 1

    def test_trigger_while_loading_is_dropped(self):
        records = list(range(100))
        nested_results = []

        def fetch(start, end):
            nested_results.append(feed.load_page())
            nested_results.append(feed.load_page(reset=True))
            return records[start : end + 1]

        fetch_mock = MagicMock(side_effect=fetch)
        feed = PaginatedFeed(fetch_mock, page_size=10)

        assert feed.load_page(reset=True) is True
        assert nested_results == [False, False]
        assert fetch_mock.call_count == 1
        assert len(feed.items) == 10
        assert feed.loading is False

    def test_reset_replaces_items(self):
        source = RangeSource(60)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        feed.load_page()
        feed.load_page()
        assert len(feed.items) == 30

        source.records = ["new"] + source.records
        feed.load_page(reset=True)

        assert feed.items == source.records[:10]
        assert feed.page == 1
        assert feed.has_more is True

    def test_reload_restores_has_more(self):
        source = RangeSource(3)
        feed = PaginatedFeed(source, page_size=3)
        feed.load_page(reset=True)
        feed.load_page()
        assert feed.has_more is False

        source.records = list(range(6))
        assert feed.reload() is True

        assert feed.items == [0, 1, 2]
        assert feed.has_more is True

    def test_fetch_error_keeps_last_good_state(self):
        source = RangeSource(30)
        on_error = MagicMock()
        feed = PaginatedFeed(source, page_size=10, on_error=on_error)
        feed.load_page(reset=True)

        error = RuntimeError("connection lost")
        feed.fetch_range = MagicMock(side_effect=error)

        assert feed.load_page() is False
        assert feed.items == list(range(10))
        assert feed.page == 1
        assert feed.has_more is True
        assert feed.loading is False
        assert feed.last_error is error
        on_error.assert_called_once_with(error)

    def test_failed_reload_keeps_exhausted_state(self):
        source = RangeSource(5)
        listener = MagicMock()
        feed = PaginatedFeed(source, page_size=24)
        feed.load_page(reset=True)
        assert feed.has_more is False
        feed.on_has_more_change(listener)

        error = RuntimeError("connection lost")
        feed.fetch_range = MagicMock(side_effect=error)

        assert feed.reload() is False
        assert feed.items == list(range(5))
        assert feed.page == 1
        assert feed.has_more is False
        assert feed.loading is False
        assert feed.last_error is error
        assert feed.failed_reset is True
        listener.assert_not_called()

    def test_retry_repeats_failed_reset(self):
        source = RangeSource(5)
        feed = PaginatedFeed(source, page_size=24)
        feed.load_page(reset=True)
        feed.fetch_range = MagicMock(side_effect=RuntimeError("connection lost"))
        feed.reload()

        source.records = ["new"] + source.records
        feed.fetch_range = source
        assert feed.retry() is True

        assert feed.items == ["new", 0, 1, 2, 3, 4]
        assert source.calls[-1] == (0, 23)
        assert feed.failed_reset is False

    def test_retry_repeats_failed_next_page(self):
        source = RangeSource(30)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        feed.fetch_range = MagicMock(side_effect=RuntimeError("connection lost"))
        feed.load_page()
        assert feed.failed_reset is False

        feed.fetch_range = source
        assert feed.retry() is True

        assert feed.items == list(range(20))
        assert source.calls[-1] == (10, 19)

    def test_success_after_error_clears_last_error(self):
        source = RangeSource(30)
        feed = PaginatedFeed(MagicMock(side_effect=RuntimeError("boom")), page_size=10)
        feed.load_page(reset=True)
        assert feed.last_error is not None

        feed.fetch_range = source
        assert feed.load_page(reset=True) is True
        assert feed.last_error is None

    def test_close_discards_in_flight_response(self):
        def fetch(start, end):
            feed.close()
            return list(range(start, end + 1))

        feed = PaginatedFeed(fetch, page_size=5)

        assert feed.load_page(reset=True) is False
        assert feed.items == []
        assert feed.page == 0

    def test_close_discards_in_flight_error(self):
        on_error = MagicMock()

        def fetch(start, end):
            feed.close()
            raise RuntimeError("late failure")

        feed = PaginatedFeed(fetch, page_size=5, on_error=on_error)

        assert feed.load_page(reset=True) is False
        assert feed.last_error is None
        on_error.assert_not_called()

    def test_closed_feed_does_not_fetch(self):
        source = RangeSource(10)
        feed = PaginatedFeed(source, page_size=5)
        feed.close()

        assert feed.load_page(reset=True) is False
        assert feed.reload() is False
        assert source.calls == []

    def test_remove_and_replace(self):
        feed = PaginatedFeed(RangeSource(5), page_size=10)
        feed.load_page(reset=True)

        removed = feed.remove(lambda item: item % 2 == 0)
        assert removed == [0, 2, 4]
        assert feed.items == [1, 3]

        assert feed.replace(lambda item: item == 3, 30) is True
        assert feed.items == [1, 30]
        assert feed.replace(lambda item: item == 99, 0) is False

    def test_has_more_listener_fires_on_change_only(self):
        feed = PaginatedFeed(RangeSource(15), page_size=10)
        listener = MagicMock()
        remove = feed.on_has_more_change(listener)

        feed.load_page(reset=True)
        listener.assert_not_called()

        feed.load_page()
        listener.assert_called_once_with(False)

        remove()
        feed.reload()
        listener.assert_called_once_with(False)


class TestSentinelObserver:
    """Test cases for SentinelObserver."""

    def test_observe_sentinel_arms_observer(self):
        feed = PaginatedFeed(RangeSource(50), page_size=10)
        observer = feed.observe_sentinel()

        assert isinstance(observer, SentinelObserver)
        assert observer.armed is True
        assert observer.root_margin == 300

    def test_notify_outside_margin_does_not_load(self):
        source = RangeSource(50)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        observer = feed.observe_sentinel()

        assert observer.notify(301) is False
        assert len(source.calls) == 1

    def test_notify_within_margin_loads_next_page(self):
        source = RangeSource(50)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        observer = feed.observe_sentinel()

        assert observer.notify(300) is True
        assert observer.notify(0) is True
        assert len(feed.items) == 30

    def test_notify_stops_when_exhausted(self):
        source = RangeSource(12)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        observer = feed.observe_sentinel()

        assert observer.notify(0) is True
        assert feed.has_more is False
        assert observer.notify(0) is False
        assert len(source.calls) == 2

    def test_rearms_when_has_more_changes(self):
        source = RangeSource(12)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        observer = feed.observe_sentinel()

        observer.notify(0)
        assert observer.rearm_count == 1

        feed.reload()
        assert observer.rearm_count == 2
        assert observer.armed is True

    def test_close_disconnects_observer(self):
        source = RangeSource(50)
        feed = PaginatedFeed(source, page_size=10)
        feed.load_page(reset=True)
        observer = feed.observe_sentinel()

        feed.close()

        assert observer.armed is False
        assert observer.notify(0) is False
        assert len(source.calls) == 1
