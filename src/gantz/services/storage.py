"""Media storage service for Google Cloud Storage uploads."""

import mimetypes
import secrets
import time
from typing import Protocol

from google.cloud import storage  # type: ignore[attr-defined]
from google.cloud.exceptions import GoogleCloudError

from ..config import get_env
from ..error_handling import StorageError, UploadError
from ..logging_config import get_logger, log_error

logger = get_logger(__name__)

DEFAULT_EXTENSION = "jpg"
CACHE_CONTROL = "public, max-age=3600"


class UploadedFileLike(Protocol):
    """What Streamlit's ``UploadedFile`` offers."""

    name: str
    type: str | None

    def getvalue(self) -> bytes: ...


def file_extension(filename: str) -> str:
    """Extension after the last dot, or ``jpg`` when there is none."""
    _, dot, ext = filename.rpartition(".")
    ext = ext.strip()
    if not dot or not ext or "/" in ext:
        return DEFAULT_EXTENSION
    return ext


def build_media_key(filename: str, prefix: str = "images", now_ms: int | None = None, token: str | None = None) -> str:
    """
    Build a storage key ``<prefix>/<epoch-millis>-<random-hex>.<ext>``.

    Args:
        filename: Original filename, used only for its extension
        prefix: Key prefix inside the bucket
        now_ms: Epoch milliseconds (defaults to now)
        token: Random hex component (defaults to 12 random hex digits)

    Returns:
        str: Object key
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    if token is None:
        token = secrets.token_hex(6)
    return f"{prefix.strip('/')}/{now_ms}-{token}.{file_extension(filename)}"


class MediaStorage:
    """Uploads images to the public media bucket."""

    def __init__(self, bucket_name: str | None = None, project_id: str | None = None, prefix: str | None = None):
        """
        Initialize the media storage.

        Args:
            bucket_name: GCS media bucket (defaults to GCS_MEDIA_BUCKET)
            project_id: GCP project ID (defaults to GOOGLE_CLOUD_PROJECT)
            prefix: Key prefix (defaults to MEDIA_PREFIX, then "images")

        Raises:
            StorageError: If configuration is missing or the client cannot be created
        """
        self.bucket_name = bucket_name or get_env("GCS_MEDIA_BUCKET")
        self.project_id = project_id or get_env("GOOGLE_CLOUD_PROJECT")
        self.prefix = prefix or get_env("MEDIA_PREFIX", "images")

        if not self.bucket_name:
            raise StorageError("GCS_MEDIA_BUCKET environment variable is required")
        if not self.project_id:
            raise StorageError("GOOGLE_CLOUD_PROJECT environment variable is required")

        try:
            self.client = storage.Client(project=self.project_id)
            self.bucket = self.client.bucket(self.bucket_name)
            logger.info("media_storage_initialized", bucket=self.bucket_name, prefix=self.prefix)
        except Exception as e:
            raise StorageError(f"Failed to initialize GCS client: {e}", original_exception=e) from e

    def upload_image(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        """
        Upload image bytes under a fresh key and return the public URL.

        The upload never overwrites an existing object.

        Raises:
            UploadError: If the bucket rejects the upload
        """
        key = build_media_key(filename, self.prefix)
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"

        blob = self.bucket.blob(key)
        blob.cache_control = CACHE_CONTROL

        try:
            blob.upload_from_string(data, content_type=content_type, if_generation_match=0)
        except GoogleCloudError as e:
            log_error(e, {"operation": "upload_image", "key": key, "filename": filename})
            raise UploadError(
                f"Failed to upload '{filename}': {e}",
                code="media_upload_failed",
                user_message=f"업로드 실패: {e}",
                details={"key": key, "filename": filename},
                original_exception=e,
            ) from e

        logger.info("media_uploaded", key=key, size=len(data), content_type=content_type)
        return str(blob.public_url)

    def upload_file(self, uploaded_file: UploadedFileLike) -> str:
        """Upload a Streamlit ``UploadedFile``."""
        return self.upload_image(uploaded_file.getvalue(), uploaded_file.name, uploaded_file.type)


# Global media storage instance
_media_storage: MediaStorage | None = None


def get_media_storage() -> MediaStorage:
    """Get the global media storage instance."""
    global _media_storage
    if _media_storage is None:
        _media_storage = MediaStorage()
    return _media_storage
