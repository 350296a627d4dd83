"""Folder API: create, list, fetch, update, delete, favorite."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.common import DeletionReport, Envelope
from ..schemas.folder import (
    FolderCreate,
    FolderDetail,
    FolderResponse,
    FolderSummary,
    FolderUpdate,
)
from ..services.folder_service import FolderService
from .common import API_PREFIX, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_PREFIX}/folders", tags=["folders"])


@router.post("", response_model=Envelope[FolderDetail], status_code=201)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    folder = FolderService(db).create_folder(auth.user_id, data)
    return success(folder, "Folder created successfully")


@router.get("", response_model=Envelope[List[FolderSummary]])
def list_folders(
    parent_id: Optional[str] = Query(None, description="Parent folder id; omit for the root level"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Live direct children of a folder, newest first, with child counts."""
    folders = FolderService(db).list_folders(auth.user_id, parent_id)
    return success(folders, "Folders retrieved successfully")


@router.get("/{folder_id}", response_model=Envelope[FolderDetail])
def get_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    folder = FolderService(db).get_folder(auth.user_id, folder_id)
    return success(folder, "Folder retrieved successfully")


@router.patch("/{folder_id}", response_model=Envelope[FolderResponse])
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Partial update. Send ``parent_id: null`` to move the folder to the root level."""
    folder = FolderService(db).update_folder(auth.user_id, folder_id, data)
    return success(FolderResponse.model_validate(folder), "Folder updated successfully")


@router.delete("/{folder_id}", response_model=Envelope[Optional[DeletionReport]])
def delete_folder(
    folder_id: str,
    permanent: bool = Query(False),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Move to trash, or hard-delete with ``permanent=true``."""
    report = FolderService(db).delete_folder(auth.user_id, folder_id, permanent)
    message = "Folder permanently deleted" if permanent else "Folder moved to trash"
    return success(report, message)


@router.post("/{folder_id}/favorite", response_model=Envelope[FolderResponse])
def toggle_folder_favorite(
    folder_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    folder = FolderService(db).toggle_favorite(auth.user_id, folder_id)
    state = "added to" if folder.is_favorite else "removed from"
    return success(FolderResponse.model_validate(folder), f"Folder {state} favorites")
