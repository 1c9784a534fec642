"""
Paginated feed controller.

Loads fixed-size pages of newest-first records and appends them. A batch
shorter than the page size is the only end-of-data signal, so a collection
whose size is an exact multiple of the page size costs one extra empty fetch.

At most one fetch runs at a time: a trigger that arrives while a fetch is in
flight is dropped, not queued. ``close()`` advances a generation counter so a
response that lands after the owning view is gone cannot touch its state.
"""

import time
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from ..logging_config import get_logger, log_performance

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 24
DEFAULT_ROOT_MARGIN = 300

# fetch_range(start, end) returns rows start..end inclusive
RangeFetcher = Callable[[int, int], Sequence[T]]
ErrorHandler = Callable[[Exception], None]


class PaginatedFeed(Generic[T]):
    """Offset-cursor pagination with an in-flight guard."""

    def __init__(
        self,
        fetch_range: RangeFetcher[T],
        page_size: int = DEFAULT_PAGE_SIZE,
        on_error: ErrorHandler | None = None,
        name: str = "feed",
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.fetch_range = fetch_range
        self.page_size = page_size
        self.on_error = on_error
        self.name = name

        self.items: list[T] = []
        self.page = 0
        self.loading = False
        self.last_error: Exception | None = None
        self.failed_reset = False
        self.closed = False

        self._has_more = True
        self._generation = 0
        self._has_more_listeners: list[Callable[[bool], None]] = []
        self._observers: list["SentinelObserver"] = []

    @property
    def has_more(self) -> bool:
        return self._has_more

    def _set_has_more(self, value: bool) -> None:
        if value == self._has_more:
            return
        self._has_more = value
        for listener in list(self._has_more_listeners):
            listener(value)

    def page_range(self, page: int) -> tuple[int, int]:
        """Inclusive row range of ``page``."""
        start = page * self.page_size
        return start, start + self.page_size - 1

    def load_page(self, reset: bool = False) -> bool:
        """
        Fetch the next page, or the first page again when ``reset``.

        Returns:
            bool: True if the feed state changed
        """
        if self.closed or self.loading:
            return False
        if not reset and not self._has_more:
            return False

        self.loading = True
        generation = self._generation
        page = 0 if reset else self.page
        start, end = self.page_range(page)
        started = time.perf_counter()

        try:
            batch = list(self.fetch_range(start, end))
        except Exception as e:
            if generation != self._generation:
                logger.info("stale_page_error_discarded", feed=self.name, page=page)
                return False
            self.loading = False
            self.last_error = e
            self.failed_reset = reset
            logger.warning("feed_page_failed", feed=self.name, page=page, error=str(e))
            if self.on_error is not None:
                self.on_error(e)
            return False

        if generation != self._generation:
            logger.info("stale_page_discarded", feed=self.name, page=page, batch_size=len(batch))
            return False

        self.loading = False
        self.last_error = None
        self.failed_reset = False
        if reset:
            self.items = batch
            self.page = 1
            self._set_has_more(len(batch) == self.page_size)
        else:
            self.items = self.items + batch
            self.page += 1
            if len(batch) < self.page_size:
                self._set_has_more(False)

        log_performance(
            "feed_load_page",
            time.perf_counter() - started,
            feed=self.name,
            page=page,
            reset=reset,
            batch_size=len(batch),
            total=len(self.items),
            has_more=self._has_more,
        )
        return True

    def reload(self) -> bool:
        """Reload from the first page, e.g. after a create elsewhere."""
        return self.load_page(reset=True)

    def retry(self) -> bool:
        """Repeat the fetch that failed last: the first page if it was a reset."""
        return self.load_page(reset=self.failed_reset)

    def remove(self, predicate: Callable[[T], bool]) -> list[T]:
        """Drop items locally after a delete; returns the removed items."""
        removed = [item for item in self.items if predicate(item)]
        if removed:
            self.items = [item for item in self.items if not predicate(item)]
        return removed

    def replace(self, predicate: Callable[[T], bool], item: T) -> bool:
        """Swap in an edited item in place."""
        changed = False
        updated = []
        for existing in self.items:
            if predicate(existing):
                updated.append(item)
                changed = True
            else:
                updated.append(existing)
        self.items = updated
        return changed

    def on_has_more_change(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._has_more_listeners.append(listener)

        def remove() -> None:
            if listener in self._has_more_listeners:
                self._has_more_listeners.remove(listener)

        return remove

    def observe_sentinel(self, root_margin: int = DEFAULT_ROOT_MARGIN) -> "SentinelObserver":
        """Create and arm a sentinel observer owned by this feed."""
        observer = SentinelObserver(self, root_margin=root_margin)
        self._observers.append(observer)
        observer.observe()
        return observer

    def close(self) -> None:
        """Tear down: disconnect observers and orphan any in-flight fetch."""
        if self.closed:
            return
        self.closed = True
        self._generation += 1
        self.loading = False
        for observer in self._observers:
            observer.disconnect()
        self._observers.clear()
        logger.debug("feed_closed", feed=self.name)


class SentinelObserver:
    """
    Triggers the next page when a sentinel nears the viewport.

    ``notify(distance)`` reports how far the sentinel is from the visible
    area (0 or less means on screen). The observer re-arms itself whenever
    the feed's ``has_more`` changes.
    """

    def __init__(self, feed: PaginatedFeed, root_margin: int = DEFAULT_ROOT_MARGIN):
        self.feed = feed
        self.root_margin = root_margin
        self.armed = False
        self.rearm_count = 0
        self._remove_listener: Callable[[], None] | None = None

    def observe(self) -> None:
        self.armed = True
        if self._remove_listener is None:
            self._remove_listener = self.feed.on_has_more_change(self._rearm)

    def _rearm(self, has_more: bool) -> None:
        self.armed = True
        self.rearm_count += 1
        logger.debug("sentinel_rearmed", feed=self.feed.name, has_more=has_more)

    def notify(self, distance: float) -> bool:
        """
        Handle an intersection report.

        Returns:
            bool: True if a page load ran and changed the feed
        """
        if not self.armed or distance > self.root_margin:
            return False
        if not self.feed.has_more:
            return False
        return self.feed.load_page(False)

    def disconnect(self) -> None:
        self.armed = False
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
