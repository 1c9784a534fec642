"""Photo gallery actions."""

import streamlit as st

from ...config import get_feed_page_size
from ...error_handling import ValidationError
from ...logging_config import get_logger
from ...models.photo import Photo
from ...services.feed import PaginatedFeed
from ...services.image_processor import ImageProcessor
from ...services.records import RecordStore
from ...services.storage import MediaStorage, UploadedFileLike

logger = get_logger(__name__)

FEED_KEY = "photo_feed"
SELECTED_KEY = "photo_selected_id"
FEED_ERROR_KEY = "photo_feed_error"
SENTINEL_KEY = "photo_feed_sentinel"


def _remember_feed_error(error: Exception) -> None:
    st.session_state[FEED_ERROR_KEY] = f"불러오기 실패: {error}"


def get_photo_feed(store: RecordStore) -> PaginatedFeed[Photo]:
    """Get the gallery feed of this session, loading the first page on creation."""
    feed = st.session_state.get(FEED_KEY)
    if feed is None or feed.closed:
        feed = PaginatedFeed(store.select_photos, page_size=get_feed_page_size(), on_error=_remember_feed_error, name="photos")
        st.session_state[FEED_KEY] = feed
        st.session_state[SENTINEL_KEY] = feed.observe_sentinel()
        feed.load_page(reset=True)
    return feed


def close_photo_feed() -> None:
    """Tear down the gallery feed when leaving the page."""
    feed = st.session_state.pop(FEED_KEY, None)
    if feed is not None:
        feed.close()
    st.session_state.pop(SENTINEL_KEY, None)
    st.session_state.pop(SELECTED_KEY, None)
    st.session_state.pop(FEED_ERROR_KEY, None)


def create_photo(
    store: RecordStore,
    media: MediaStorage,
    processor: ImageProcessor,
    actor: str | None,
    uploaded_file: UploadedFileLike | None,
    caption: str = "",
    feed: PaginatedFeed[Photo] | None = None,
) -> Photo:
    """
    Upload a photo, persist its record, then reload the feed from the top.

    The record is only written after the upload succeeded.

    Raises:
        ValidationError: If no file was chosen or it is not a usable image
        UploadError: If the bucket rejects the file
        AuthorizationError: If ``actor`` is not the admin
        DatabaseError: If the insert fails
    """
    store.policy.require_admin(actor, "create_photo")
    if uploaded_file is None:
        raise ValidationError("No file selected", code="file_missing", user_message="사진을 업로드!")

    data = uploaded_file.getvalue()
    processor.validate_image(data, uploaded_file.name, uploaded_file.type)
    taken_at = processor.extract_taken_at(data)

    image_url = media.upload_image(data, uploaded_file.name, uploaded_file.type)
    photo = store.insert_photo(actor, image_url, (caption or "").strip(), taken_at)

    if feed is not None:
        feed.reload()
    return photo


def save_caption(
    store: RecordStore, actor: str | None, photo: Photo, caption: str, feed: PaginatedFeed[Photo] | None = None
) -> Photo:
    """
    Save a new caption and patch it into the feed.

    Raises:
        ValidationError: If the photo no longer exists
    """
    if not store.update_photo_caption(actor, photo.id, caption):
        raise ValidationError(f"Photo not found: {photo.id}", code="photo_not_found", user_message="이미 삭제된 사진입니다.")
    updated = photo.with_caption(caption)
    if feed is not None:
        feed.replace(lambda item: item.id == photo.id, updated)
    return updated


def delete_photo(
    store: RecordStore,
    actor: str | None,
    photo_id: str,
    feed: PaginatedFeed[Photo] | None = None,
    selected_id: str | None = None,
) -> bool:
    """
    Delete a photo record and drop it from the feed.

    Returns:
        bool: True if the open detail view showed this photo and must close

    Raises:
        ValidationError: If the photo was already gone; it is still dropped from the feed
    """
    deleted = store.delete_photo(actor, photo_id)
    if feed is not None:
        feed.remove(lambda item: item.id == photo_id)
    if not deleted:
        raise ValidationError(f"Photo not found: {photo_id}", code="photo_not_found", user_message="이미 삭제된 사진입니다.")
    return selected_id == photo_id


def load_more_photos() -> bool:
    """Report the bottom sentinel as reached; loads the next page when armed."""
    observer = st.session_state.get(SENTINEL_KEY)
    if observer is None:
        return False
    return observer.notify(0)
