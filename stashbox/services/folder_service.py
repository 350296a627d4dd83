"""Folder lifecycle: create, list, fetch, update, trash/delete, favorite.

Every method takes the acting owner's id explicitly. Lookups of folders that
are missing, trashed or owned by someone else all fail the same way.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from ..exceptions import FolderNotFoundError, InvalidOperationError
from ..models import Folder
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..schemas.common import DeletionReport
from ..schemas.folder import (
    FolderCounts,
    FolderCreate,
    FolderDetail,
    FolderResponse,
    FolderSummary,
    FolderUpdate,
)
from ..schemas.item import ItemResponse

logger = logging.getLogger(__name__)


class FolderService:
    """Folder operations behind a narrow interface.

    Public methods:
        create_folder   -- parent must be live and owned by the caller
        list_folders    -- direct live children of a parent (or root), with counts
        get_folder      -- live folder with parent, subfolders and items
        update_folder   -- partial update; rejects direct self-parenting
        delete_folder   -- soft trash, or hard delete when permanent
        toggle_favorite -- flips is_favorite on a live folder
    """

    def __init__(self, db: Session):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.item_repo = ItemRepository(db)

    def _require_parent(self, owner_id: str, parent_id: str) -> Folder:
        parent = self.folder_repo.get_live_optional(owner_id, parent_id)
        if parent is None:
            raise FolderNotFoundError(parent_id, "Parent folder not found")
        return parent

    def create_folder(self, owner_id: str, data: FolderCreate) -> FolderDetail:
        if data.parent_id:
            self._require_parent(owner_id, data.parent_id)

        folder = self.folder_repo.add(Folder(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=data.name,
            description=data.description,
            color=data.color,
            parent_id=data.parent_id or None,
            is_favorite=False,
            is_deleted=False,
        ))
        self.db.commit()
        self.db.refresh(folder)
        logger.info("Folder created", extra={"owner_id": owner_id, "folder_id": folder.id})
        return FolderDetail.model_validate(folder)

    def list_folders(self, owner_id: str, parent_id: Optional[str] = None) -> List[FolderSummary]:
        folders = self.folder_repo.list_children(owner_id, parent_id)
        counts = self.folder_repo.count_children(owner_id, [f.id for f in folders])
        summaries = []
        for folder in folders:
            subfolders, items = counts.get(folder.id, (0, 0))
            summary = FolderSummary.model_validate(folder)
            summary.counts = FolderCounts(subfolders=subfolders, items=items)
            summaries.append(summary)
        return summaries

    def get_folder(self, owner_id: str, folder_id: str) -> FolderDetail:
        folder = self.folder_repo.get_live(owner_id, folder_id)
        detail = FolderDetail.model_validate(folder)

        if folder.parent_id:
            parent = self.folder_repo.get_any_optional(owner_id, folder.parent_id)
            if parent is not None:
                detail.parent = FolderResponse.model_validate(parent)
        detail.subfolders = [
            FolderResponse.model_validate(f)
            for f in self.folder_repo.list_children(owner_id, folder.id)
        ]
        detail.items = [
            ItemResponse.model_validate(i)
            for i in self.item_repo.list_in_folder(owner_id, folder.id)
        ]
        return detail

    def update_folder(self, owner_id: str, folder_id: str, data: FolderUpdate) -> Folder:
        folder = self.folder_repo.get_live(owner_id, folder_id)
        changes = data.model_dump(exclude_unset=True)

        new_parent = changes.get("parent_id")
        if new_parent is not None:
            # Single hop only: A -> B -> A is not detected.
            if new_parent == folder_id:
                raise InvalidOperationError("Folder cannot be its own parent", folder_id)
            self._require_parent(owner_id, new_parent)

        for field, value in changes.items():
            setattr(folder, field, value)

        self.db.commit()
        self.db.refresh(folder)
        logger.info(
            "Folder updated",
            extra={"owner_id": owner_id, "folder_id": folder_id, "fields": sorted(changes)},
        )
        return folder

    def delete_folder(self, owner_id: str, folder_id: str, permanent: bool = False) -> Optional[DeletionReport]:
        """Trash the folder, or hard-delete it when *permanent*.

        Children are never trashed here. On hard delete the database removes
        subfolder rows and moves the folder's items to the root level.
        """
        folder = self.folder_repo.get_any(owner_id, folder_id)

        if permanent:
            self.folder_repo.delete(folder)
            self.db.commit()
            logger.info("Folder permanently deleted", extra={"owner_id": owner_id, "folder_id": folder_id})
            return DeletionReport(deleted_folders=1)

        folder.is_deleted = True
        self.db.commit()
        logger.info("Folder moved to trash", extra={"owner_id": owner_id, "folder_id": folder_id})
        return None

    def toggle_favorite(self, owner_id: str, folder_id: str) -> Folder:
        folder = self.folder_repo.get_live(owner_id, folder_id)
        folder.is_favorite = not folder.is_favorite
        self.db.commit()
        self.db.refresh(folder)
        logger.info(
            "Folder favorite toggled",
            extra={"owner_id": owner_id, "folder_id": folder_id, "is_favorite": folder.is_favorite},
        )
        return folder
