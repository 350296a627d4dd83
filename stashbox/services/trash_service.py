"""Trash: list, restore, and empty (with storage cleanup)."""

import logging
from typing import Dict, List, Union

from sqlalchemy.orm import Session

from ..exceptions import FolderNotFoundError, ItemNotFoundError
from ..models import File, Folder, Item
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..schemas.collection import FolderItemCollection, TrashEntityType
from ..schemas.common import DeletionReport
from ..schemas.folder import FolderResponse
from ..schemas.item import ItemResponse
from ..storage import ObjectStorage
from .file_service import FileService

logger = logging.getLogger(__name__)


class TrashService:
    """Trash operations.

    Public methods:
        get_trash   -- trashed folders and items, newest change first
        restore     -- clear is_deleted on one trashed folder or item
        empty_trash -- release stored objects, then hard-delete every trashed row
    """

    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.item_repo = ItemRepository(db)
        self.file_service = FileService(db, storage)

    def get_trash(self, owner_id: str) -> FolderItemCollection:
        return FolderItemCollection(
            folders=[FolderResponse.model_validate(f) for f in self.folder_repo.list_trashed(owner_id)],
            items=[ItemResponse.model_validate(i) for i in self.item_repo.list_trashed(owner_id)],
        )

    def restore(self, owner_id: str, entity_id: str, kind: TrashEntityType) -> Union[Folder, Item]:
        """Restore one record. Its folder/parent reference is not re-validated."""
        if kind == TrashEntityType.FOLDER:
            entity = self.folder_repo.get_trashed_optional(owner_id, entity_id)
            if entity is None:
                raise FolderNotFoundError(entity_id, "Folder not found in trash")
        else:
            entity = self.item_repo.get_trashed_optional(owner_id, entity_id)
            if entity is None:
                raise ItemNotFoundError(entity_id, "Item not found in trash")

        entity.is_deleted = False
        self.db.commit()
        self.db.refresh(entity)
        logger.info(
            "Restored from trash",
            extra={"owner_id": owner_id, "entity_id": entity_id, "kind": kind.value},
        )
        return entity

    def empty_trash(self, owner_id: str) -> DeletionReport:
        """Hard-delete everything in the owner's trash.

        Stored objects are removed first, one at a time. A failed removal is
        recorded in the report and the sweep continues; metadata is deleted
        regardless. Files still referenced by a live item are kept.
        """
        trashed_ids = [i.id for i in self.item_repo.list_trashed(owner_id)]

        first_item_by_file: Dict[str, Item] = {}
        for item in self.item_repo.list_trashed_with_files(owner_id):
            first_item_by_file.setdefault(item.file_id, item)

        releasable: List[File] = []
        report = DeletionReport()
        for file_id, item in first_item_by_file.items():
            if self.item_repo.count_file_references(file_id, exclude_ids=trashed_ids) > 0:
                continue
            file = item.file
            if file is None:
                continue
            failure = self.file_service.remove_object(file, item.id)
            if failure is not None:
                report.storage_failures.append(failure)
            releasable.append(file)

        report.deleted_folders = self.folder_repo.delete_trashed(owner_id)
        report.deleted_items = self.item_repo.delete_trashed(owner_id)
        for file in releasable:
            self.file_service.delete_record(file)

        self.db.commit()
        logger.info(
            "Trash emptied",
            extra={
                "owner_id": owner_id,
                "deleted_folders": report.deleted_folders,
                "deleted_items": report.deleted_items,
                "storage_failures": len(report.storage_failures),
            },
        )
        return report
