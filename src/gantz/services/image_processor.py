"""Image checks and EXIF capture time for uploads."""

import io
import os
from datetime import UTC, datetime
from typing import Any

from PIL import ExifTags, Image, UnidentifiedImageError

from ..error_handling import ValidationError
from ..logging_config import get_logger, log_error

logger = get_logger(__name__)


class ImageProcessor:
    """Validates uploaded images and reads when they were taken."""

    # EXIF date tags in priority order
    EXIF_DATE_TAGS = [
        "DateTimeOriginal",
        "DateTime",
        "DateTimeDigitized",
    ]

    def __init__(self) -> None:
        self.MAX_FILE_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 20 * 1024 * 1024))
        self._tag_ids = {name: tag for tag, name in ExifTags.TAGS.items()}

    def validate_image(self, image_data: bytes, filename: str, content_type: str | None = None) -> None:
        """
        Reject payloads that cannot be a photo upload.

        Raises:
            ValidationError: If the file is empty, too large, or not an image
        """
        if not image_data:
            raise ValidationError(
                f"File '{filename}' is empty",
                code="file_empty",
                user_message="사진을 업로드!",
                details={"filename": filename},
            )

        if len(image_data) > self.MAX_FILE_SIZE:
            max_size_mb = self.MAX_FILE_SIZE / (1024 * 1024)
            raise ValidationError(
                f"File '{filename}' is too large ({len(image_data)} bytes)",
                code="file_too_large",
                user_message=f"파일이 너무 커요. 최대 {max_size_mb:.0f}MB",
                details={"filename": filename, "file_size": len(image_data), "max_size": self.MAX_FILE_SIZE},
            )

        if content_type and not content_type.startswith("image/"):
            raise ValidationError(
                f"File '{filename}' is not an image ({content_type})",
                code="not_an_image",
                user_message="이미지 파일만 올릴 수 있어요.",
                details={"filename": filename, "content_type": content_type},
            )

    def extract_taken_at(self, image_data: bytes) -> datetime | None:
        """
        Extract the capture time from EXIF data.

        EXIF carries no timezone; the value is stored as UTC as-is.

        Returns:
            datetime: Capture time if found, None otherwise
        """
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                exif_data = image.getexif()
                if not exif_data:
                    return None

                # DateTimeOriginal and DateTimeDigitized live in the Exif sub-IFD
                tags: dict[Any, Any] = dict(exif_data)
                tags.update(exif_data.get_ifd(ExifTags.IFD.Exif))

                for tag_name in self.EXIF_DATE_TAGS:
                    taken_at = self._parse_exif_date(tags.get(self._tag_ids.get(tag_name)))
                    if taken_at:
                        logger.debug("exif_date_extracted", tag_name=tag_name, taken_at=taken_at.isoformat())
                        return taken_at

                return None

        except (UnidentifiedImageError, OSError, ValueError) as e:
            log_error(e, {"operation": "extract_taken_at"})
            return None

    @staticmethod
    def _parse_exif_date(value: Any) -> datetime | None:
        if not value or not isinstance(value, str):
            return None
        try:
            return datetime.strptime(value.strip("\x00 "), "%Y:%m:%d %H:%M:%S").replace(tzinfo=UTC)
        except ValueError:
            logger.debug("exif_date_parse_failed", date_string=value)
            return None


# Global image processor instance
image_processor = ImageProcessor()


def get_image_processor() -> ImageProcessor:
    """Get the global image processor instance."""
    return image_processor
