"""People directory actions."""

from ...models.person import Person, PersonDraft
from ...services.image_processor import ImageProcessor
from ...services.records import RecordStore
from ...services.storage import MediaStorage, UploadedFileLike, get_media_storage


def _upload_avatar(
    media: MediaStorage | None, processor: ImageProcessor, avatar_file: UploadedFileLike | None, draft: PersonDraft
) -> PersonDraft:
    if avatar_file is None:
        return draft
    if media is None:
        media = get_media_storage()
    data = avatar_file.getvalue()
    processor.validate_image(data, avatar_file.name, avatar_file.type)
    avatar_url = media.upload_image(data, avatar_file.name, avatar_file.type)
    return PersonDraft(
        name=draft.name,
        mbti=draft.mbti,
        bio=draft.bio,
        avatar_url=avatar_url,
        extras=list(draft.extras),
    )


def create_person(
    store: RecordStore,
    media: MediaStorage | None,
    processor: ImageProcessor,
    actor: str | None,
    draft: PersonDraft,
    avatar_file: UploadedFileLike | None = None,
) -> Person:
    """
    Register a person, uploading the avatar first when one was picked.

    Raises:
        AuthorizationError: If ``actor`` is not the admin
        ValidationError: If the name is blank or an extras key repeats
        UploadError: If the avatar upload fails
    """
    store.policy.require_admin(actor, "create_person")
    draft = draft.normalized()
    draft = _upload_avatar(media, processor, avatar_file, draft)
    return store.insert_person(actor, draft)


def save_person(
    store: RecordStore,
    media: MediaStorage | None,
    processor: ImageProcessor,
    actor: str | None,
    person_id: str,
    draft: PersonDraft,
    avatar_file: UploadedFileLike | None = None,
) -> bool:
    """Save an edited profile; a newly picked avatar replaces the old URL."""
    store.policy.require_admin(actor, "update_person")
    draft = draft.normalized()
    draft = _upload_avatar(media, processor, avatar_file, draft)
    return store.update_person(actor, person_id, draft)


def delete_person(store: RecordStore, actor: str | None, person_id: str) -> bool:
    return store.delete_person(actor, person_id)
