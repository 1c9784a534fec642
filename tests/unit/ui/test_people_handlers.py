"""
Unit tests for people directory actions.
"""

from unittest.mock import MagicMock

import pytest

from gantz.error_handling import AuthorizationError, ValidationError
from gantz.models.person import PersonDraft
from gantz.services.image_processor import ImageProcessor
from gantz.ui.handlers.people import create_person, delete_person, save_person
from tests.conftest import TestDataFactory


@pytest.fixture
def media():
    media = MagicMock()
    media.upload_image.return_value = "https://cdn.example.com/avatar.png"
    return media


class TestCreatePerson:
    def test_without_avatar(self, store, admin, media):
        person = create_person(store, media, ImageProcessor(), admin, PersonDraft(name="간츠"))

        assert person.avatar_url is None
        media.upload_image.assert_not_called()

    def test_with_avatar(self, store, admin, media):
        avatar = TestDataFactory.create_uploaded_file("me.png", "image/png", TestDataFactory.create_image_bytes("PNG"))

        person = create_person(store, media, ImageProcessor(), admin, PersonDraft(name="간츠"), avatar)

        assert person.avatar_url == "https://cdn.example.com/avatar.png"
        assert store.get_person(person.id).avatar_url == "https://cdn.example.com/avatar.png"

    def test_invalid_draft_skips_upload(self, store, admin, media):
        avatar = TestDataFactory.create_uploaded_file("me.png", "image/png")

        with pytest.raises(ValidationError):
            create_person(store, media, ImageProcessor(), admin, PersonDraft(name=""), avatar)

        media.upload_image.assert_not_called()
        assert store.list_people() == []

    def test_non_admin(self, store, media):
        with pytest.raises(AuthorizationError):
            create_person(store, media, ImageProcessor(), "guest@example.com", PersonDraft(name="x"))


class TestSavePerson:
    def test_keeps_avatar_when_none_picked(self, store, admin, media):
        person = store.insert_person(admin, PersonDraft(name="간츠", avatar_url="https://cdn.example.com/old.png"))

        draft = person.to_draft()
        draft.bio = "사진 찍는 사람"
        assert save_person(store, media, ImageProcessor(), admin, person.id, draft) is True

        stored = store.get_person(person.id)
        assert stored.avatar_url == "https://cdn.example.com/old.png"
        assert stored.bio == "사진 찍는 사람"
        media.upload_image.assert_not_called()

    def test_new_avatar_replaces_url(self, store, admin, media):
        person = store.insert_person(admin, PersonDraft(name="간츠", avatar_url="https://cdn.example.com/old.png"))
        avatar = TestDataFactory.create_uploaded_file("new.jpg")

        save_person(store, media, ImageProcessor(), admin, person.id, person.to_draft(), avatar)

        assert store.get_person(person.id).avatar_url == "https://cdn.example.com/avatar.png"

    def test_delete(self, store, admin):
        person = store.insert_person(admin, PersonDraft(name="간츠"))

        assert delete_person(store, admin, person.id) is True
        assert delete_person(store, admin, person.id) is False
