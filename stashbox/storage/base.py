"""Object storage contract and upload classification helpers."""

import uuid
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredObject:
    """Where an uploaded payload ended up."""
    url: str
    external_ref: str


class ObjectStorage(Protocol):
    """Binary payload store. Both calls raise StorageError on provider failure."""

    def upload(
        self,
        data: bytes,
        folder: str,
        resource_kind: str,
        filename: str,
        content_type: str,
    ) -> StoredObject:
        ...

    def remove(self, external_ref: str) -> None:
        ...


# mime prefix -> (file_type, storage folder, resource kind)
_CATEGORIES = {
    "image/": ("image", "images", "image"),
    "video/": ("video", "videos", "video"),
    "audio/": ("audio", "audios", "raw"),
}
_DEFAULT_CATEGORY = ("document", "documents", "raw")


def _category(mime_type: str):
    mime_type = (mime_type or "").lower()
    for prefix, category in _CATEGORIES.items():
        if mime_type.startswith(prefix):
            return category
    return _DEFAULT_CATEGORY


def classify_file_type(mime_type: str) -> str:
    """``image``, ``video``, ``audio`` or ``document``."""
    return _category(mime_type)[0]


def storage_folder_for(mime_type: str) -> str:
    """Folder bucket the payload is filed under in the store."""
    return _category(mime_type)[1]


def resource_kind_for(mime_type: str) -> str:
    """Transport hint passed to the provider: ``image``, ``video`` or ``raw``."""
    return _category(mime_type)[2]


def generate_stored_filename(original_filename: str) -> str:
    """Fresh UUID4 name keeping the original extension, if any."""
    name = uuid.uuid4().hex
    if original_filename and "." in original_filename:
        extension = original_filename.rsplit(".", 1)[1]
        if extension:
            return f"{name}.{extension}"
    return name
