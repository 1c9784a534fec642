"""
Pytest configuration and fixtures for gantz tests.
"""

import io
import time
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import jwt
import pytest
from PIL import Image

from gantz.config import get_config
from gantz.models.database import DatabaseManager, create_database
from gantz.services.records import AccessPolicy, RecordStore

ADMIN_EMAIL = "2601@gantz.com"


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Set up test environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("GCS_MEDIA_BUCKET", "test-media-bucket")
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "test-project")
    monkeypatch.delenv("AUTH_URL", raising=False)
    monkeypatch.delenv("AUTH_API_KEY", raising=False)
    monkeypatch.delenv("MEDIA_PREFIX", raising=False)
    get_config().clear_cache()
    yield
    get_config().clear_cache()


@pytest.fixture
def db_manager(tmp_path: Path) -> DatabaseManager:
    """A freshly created DuckDB file."""
    return create_database(str(tmp_path / "gantz.duckdb"))


@pytest.fixture
def store(db_manager: DatabaseManager) -> RecordStore:
    return RecordStore(db_manager, AccessPolicy(ADMIN_EMAIL))


@pytest.fixture
def admin() -> str:
    return ADMIN_EMAIL


@pytest.fixture
def sample_image_data() -> bytes:
    """A small PNG image."""
    return TestDataFactory.create_image_bytes("PNG")


@dataclass
class FakeUploadedFile:
    """Stand-in for Streamlit's UploadedFile."""

    name: str
    type: str | None
    data: bytes

    def getvalue(self) -> bytes:
        return self.data


class TestDataFactory:
    """Factory class for creating test data objects."""

    __test__ = False

    @staticmethod
    def create_image_bytes(image_format: str = "JPEG", exif_datetime: str | None = None) -> bytes:
        """Encode a 4x4 image, optionally with an EXIF DateTime tag."""
        image = Image.new("RGB", (4, 4), color=(200, 30, 30))
        buffer = io.BytesIO()
        if exif_datetime is not None:
            exif = Image.Exif()
            exif[0x0132] = exif_datetime
            image.save(buffer, format=image_format, exif=exif)
        else:
            image.save(buffer, format=image_format)
        return buffer.getvalue()

    @staticmethod
    def create_uploaded_file(
        name: str = "photo.jpg", content_type: str | None = "image/jpeg", data: bytes | None = None
    ) -> FakeUploadedFile:
        if data is None:
            data = TestDataFactory.create_image_bytes("JPEG")
        return FakeUploadedFile(name=name, type=content_type, data=data)

    @staticmethod
    def create_access_token(email: str = ADMIN_EMAIL, exp: int | None = None) -> str:
        """Create a signed JWT shaped like a provider access token.

        Args:
            email: Email claim
            exp: Expiration timestamp (defaults to current time + 1 hour)
        """
        current_time = int(time.time())
        payload = {
            "sub": "user-123",
            "email": email,
            "iat": current_time,
            "exp": exp if exp is not None else current_time + 3600,
        }
        return jwt.encode(payload, "gantz-test-signing-secret-0123456789", algorithm="HS256")
