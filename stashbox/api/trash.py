"""Trash API: list, restore, empty."""

from typing import Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..models import Folder
from ..schemas.collection import FolderItemCollection, TrashEntityType
from ..schemas.common import DeletionReport, Envelope
from ..schemas.folder import FolderResponse
from ..schemas.item import ItemResponse
from ..services.trash_service import TrashService
from ..storage import ObjectStorage, get_storage
from .common import API_PREFIX, success

router = APIRouter(prefix=f"{API_PREFIX}/trash", tags=["trash"])


@router.get("", response_model=Envelope[FolderItemCollection])
def get_trash(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    storage: ObjectStorage = Depends(get_storage),
):
    return success(TrashService(db, storage).get_trash(auth.user_id), "Trash retrieved successfully")


@router.post("/{entity_id}/restore", response_model=Envelope[Union[ItemResponse, FolderResponse]])
def restore_from_trash(
    entity_id: str,
    type: TrashEntityType = Query(..., description="folder or item"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    storage: ObjectStorage = Depends(get_storage),
):
    """Restore one trashed record. Its parent/folder reference is not re-validated."""
    entity = TrashService(db, storage).restore(auth.user_id, entity_id, type)
    schema = FolderResponse if isinstance(entity, Folder) else ItemResponse
    return success(schema.model_validate(entity), "Restored successfully")


@router.delete("", response_model=Envelope[DeletionReport])
def empty_trash(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    storage: ObjectStorage = Depends(get_storage),
):
    """Permanently delete everything in the trash and release stored objects."""
    report = TrashService(db, storage).empty_trash(auth.user_id)
    return success(report, "Trash emptied successfully")
