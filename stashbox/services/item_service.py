"""Item lifecycle: create, upload, list, fetch, update, trash/delete, favorite, duplicate."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import FolderNotFoundError, InvalidInputError
from ..models import Item, ItemType
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..schemas.common import DeletionReport, PageParams, PaginationMeta
from ..schemas.item import ItemCreate, ItemPage, ItemResponse, ItemUpdate
from ..storage import ObjectStorage
from .file_service import FileService, UploadPayload

RECENT_ITEMS_DEFAULT_LIMIT = 10
COPY_SUFFIX = " (Copy)"

logger = logging.getLogger(__name__)


class ItemService:
    """Item operations.

    Public methods:
        create_item      -- inline note/link/etc. item
        upload_file_item -- store a binary, then record File + Item in one commit
        list_items       -- filtered, sorted, paginated live items
        recent_items     -- live items by updated_at, newest first
        get_item / update_item / delete_item / toggle_favorite / duplicate_item
    """

    def __init__(self, db: Session, storage: Optional[ObjectStorage] = None):
        self.db = db
        self.item_repo = ItemRepository(db)
        self.folder_repo = FolderRepository(db)
        self.file_service = FileService(db, storage) if storage is not None else None

    def _files(self) -> FileService:
        if self.file_service is None:
            raise RuntimeError("ItemService was built without an object storage adapter")
        return self.file_service

    def _require_folder(self, owner_id: str, folder_id: str) -> None:
        if self.folder_repo.get_live_optional(owner_id, folder_id) is None:
            raise FolderNotFoundError(folder_id)

    def create_item(self, owner_id: str, data: ItemCreate) -> Item:
        if data.folder_id:
            self._require_folder(owner_id, data.folder_id)

        item = self.item_repo.add(Item(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=data.name,
            description=data.description,
            type=data.type.value,
            content=data.content,
            folder_id=data.folder_id or None,
            tags=list(data.tags),
            size=0,
            is_favorite=False,
            is_deleted=False,
        ))
        self.db.commit()
        self.db.refresh(item)
        logger.info("Item created", extra={"owner_id": owner_id, "item_id": item.id})
        return item

    def upload_file_item(
        self,
        owner_id: str,
        name: str,
        item_type: ItemType,
        payload: Optional[UploadPayload],
        description: Optional[str] = None,
        folder_id: Optional[str] = None,
    ) -> Item:
        """Upload a payload and record it as a file item.

        The object store is written first. If recording fails afterwards the
        transaction is rolled back and the stored object is left orphaned
        (logged with its external ref).
        """
        if payload is None or payload.size == 0:
            raise InvalidInputError("File is required", field="file")
        if folder_id:
            self._require_folder(owner_id, folder_id)

        file = self._files().store_upload(owner_id, payload)
        external_ref = file.external_ref
        try:
            item = self.item_repo.add(Item(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                name=name,
                description=description,
                type=item_type.value,
                content=None,
                file_id=file.id,
                folder_id=folder_id or None,
                tags=[],
                size=payload.size,
                is_favorite=False,
                is_deleted=False,
            ))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(
                "Item record write failed; storage object orphaned",
                extra={"owner_id": owner_id, "external_ref": external_ref},
                exc_info=True,
            )
            raise

        self.db.refresh(item)
        logger.info(
            "File item uploaded",
            extra={"owner_id": owner_id, "item_id": item.id, "file_id": item.file_id, "size": item.size},
        )
        return item

    def list_items(
        self,
        owner_id: str,
        params: PageParams,
        folder_id: Optional[str] = None,
        item_type: Optional[ItemType] = None,
        favorites: Optional[bool] = None,
    ) -> ItemPage:
        items, total = self.item_repo.list_page(
            owner_id,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
            offset=params.offset,
            limit=params.limit,
            folder_id=folder_id,
            item_type=item_type.value if item_type else None,
            favorites=favorites,
        )
        return ItemPage(
            items=[ItemResponse.model_validate(i) for i in items],
            pagination=PaginationMeta.build(params.page, params.limit, total),
        )

    def recent_items(self, owner_id: str, limit: int = RECENT_ITEMS_DEFAULT_LIMIT) -> List[Item]:
        return self.item_repo.list_recent(owner_id, limit)

    def get_item(self, owner_id: str, item_id: str) -> Item:
        return self.item_repo.get_live(owner_id, item_id)

    def update_item(self, owner_id: str, item_id: str, data: ItemUpdate) -> Item:
        item = self.item_repo.get_live(owner_id, item_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("folder_id") is not None:
            self._require_folder(owner_id, changes["folder_id"])

        for field, value in changes.items():
            setattr(item, field, value)

        self.db.commit()
        self.db.refresh(item)
        logger.info(
            "Item updated",
            extra={"owner_id": owner_id, "item_id": item_id, "fields": sorted(changes)},
        )
        return item

    def delete_item(self, owner_id: str, item_id: str, permanent: bool = False) -> Optional[DeletionReport]:
        """Trash the item, or hard-delete it when *permanent*.

        A permanently deleted item's File (and its stored object) is released
        only when no other item, such as a duplicate, still references it.
        """
        item = self.item_repo.get_any(owner_id, item_id)

        if not permanent:
            item.is_deleted = True
            self.db.commit()
            logger.info("Item moved to trash", extra={"owner_id": owner_id, "item_id": item_id})
            return None

        report = DeletionReport(deleted_items=1)
        file = item.file
        if file is not None and self.item_repo.count_file_references(file.id, exclude_ids=[item.id]) == 0:
            failure = self._files().release(file, item.id)
            if failure is not None:
                report.storage_failures.append(failure)

        self.item_repo.delete(item)
        self.db.commit()
        logger.info(
            "Item permanently deleted",
            extra={"owner_id": owner_id, "item_id": item_id, "storage_failures": len(report.storage_failures)},
        )
        return report

    def toggle_favorite(self, owner_id: str, item_id: str) -> Item:
        item = self.item_repo.get_live(owner_id, item_id)
        item.is_favorite = not item.is_favorite
        self.db.commit()
        self.db.refresh(item)
        logger.info(
            "Item favorite toggled",
            extra={"owner_id": owner_id, "item_id": item_id, "is_favorite": item.is_favorite},
        )
        return item

    def duplicate_item(self, owner_id: str, item_id: str) -> Item:
        """Copy a live item. File-backed copies share the original File row."""
        source = self.item_repo.get_live(owner_id, item_id)
        copy = self.item_repo.add(Item(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=f"{source.name}{COPY_SUFFIX}",
            description=source.description,
            type=source.type,
            content=source.content,
            file_id=source.file_id,
            folder_id=source.folder_id,
            tags=list(source.tags or []),
            size=source.size,
            is_favorite=False,
            is_deleted=False,
        ))
        self.db.commit()
        self.db.refresh(copy)
        logger.info(
            "Item duplicated",
            extra={"owner_id": owner_id, "item_id": copy.id, "source_id": item_id},
        )
        return copy
