"""
Unit tests for image processor.
"""

from datetime import UTC, datetime

import pytest

from gantz.error_handling import ValidationError
from gantz.services.image_processor import ImageProcessor
from tests.conftest import TestDataFactory


class TestValidateImage:
    """Test cases for upload validation."""

    def setup_method(self):
        self.processor = ImageProcessor()

    def test_accepts_image(self, sample_image_data):
        self.processor.validate_image(sample_image_data, "photo.png", "image/png")

    def test_rejects_empty(self):
        with pytest.raises(ValidationError) as exc_info:
            self.processor.validate_image(b"", "photo.jpg", "image/jpeg")

        assert exc_info.value.code == "file_empty"
        assert exc_info.value.user_message == "사진을 업로드!"

    def test_rejects_too_large(self):
        self.processor.MAX_FILE_SIZE = 10

        with pytest.raises(ValidationError) as exc_info:
            self.processor.validate_image(b"x" * 11, "photo.jpg", "image/jpeg")

        assert exc_info.value.code == "file_too_large"

    def test_rejects_non_image_content_type(self, sample_image_data):
        with pytest.raises(ValidationError) as exc_info:
            self.processor.validate_image(sample_image_data, "notes.pdf", "application/pdf")

        assert exc_info.value.code == "not_an_image"

    def test_max_size_from_env(self, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_SIZE", "1024")

        assert ImageProcessor().MAX_FILE_SIZE == 1024


class TestExtractTakenAt:
    """Test cases for EXIF capture time."""

    def setup_method(self):
        self.processor = ImageProcessor()

    def test_reads_exif_datetime_as_utc(self):
        data = TestDataFactory.create_image_bytes("JPEG", exif_datetime="2024:05:01 12:30:00")

        assert self.processor.extract_taken_at(data) == datetime(2024, 5, 1, 12, 30, tzinfo=UTC)

    def test_no_exif(self):
        data = TestDataFactory.create_image_bytes("JPEG")

        assert self.processor.extract_taken_at(data) is None

    def test_unparseable_date(self):
        data = TestDataFactory.create_image_bytes("JPEG", exif_datetime="sometime")

        assert self.processor.extract_taken_at(data) is None

    def test_not_an_image(self):
        assert self.processor.extract_taken_at(b"definitely not an image") is None
