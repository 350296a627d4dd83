"""Stored-file lifecycle: upload to the object store, record, release."""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StorageError
from ..models import File
from ..repositories.file_repository import FileRepository
from ..schemas.common import StorageFailure
from ..storage import (
    ObjectStorage,
    classify_file_type,
    generate_stored_filename,
    resource_kind_for,
    storage_folder_for,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadPayload:
    """Raw upload as received from the client."""
    data: bytes
    original_filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)


class FileService:
    """Owns File records and their backing objects.

    Public methods:
        store_upload  -- upload the payload, then add (flush) its File row
        remove_object -- best-effort removal of the backing object
        delete_record -- delete the File row (flush only)
        release       -- remove_object, then delete_record

    Never commits; the calling service owns the transaction.
    """

    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage
        self.file_repo = FileRepository(db)

    def store_upload(self, owner_id: str, payload: UploadPayload) -> File:
        """Upload first, then record. StorageError propagates untouched."""
        mime_type = payload.content_type or "application/octet-stream"
        stored_name = generate_stored_filename(payload.original_filename)
        stored = self.storage.upload(
            payload.data,
            storage_folder_for(mime_type),
            resource_kind_for(mime_type),
            stored_name,
            mime_type,
        )

        try:
            return self.file_repo.add(File(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                filename=stored_name,
                original_filename=payload.original_filename,
                external_ref=stored.external_ref,
                url=stored.url,
                file_type=classify_file_type(mime_type),
                mime_type=mime_type,
                size=payload.size,
            ))
        except SQLAlchemyError:
            logger.error(
                "File record write failed; storage object orphaned",
                extra={"owner_id": owner_id, "external_ref": stored.external_ref},
                exc_info=True,
            )
            raise

    def remove_object(self, file: File, item_id: str) -> Optional[StorageFailure]:
        """Remove the backing object. Returns the failure instead of raising."""
        try:
            self.storage.remove(file.external_ref)
        except StorageError:
            logger.error(
                "Storage object removal failed; deleting metadata anyway",
                extra={"item_id": item_id, "file_id": file.id, "external_ref": file.external_ref},
            )
            return StorageFailure(item_id=item_id, external_ref=file.external_ref)
        return None

    def delete_record(self, file: File) -> None:
        self.file_repo.delete(file)

    def release(self, file: File, item_id: str) -> Optional[StorageFailure]:
        failure = self.remove_object(file, item_id)
        self.delete_record(file)
        return failure
