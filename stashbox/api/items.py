"""Item API: create, upload, list, recent, fetch, update, delete, favorite, duplicate."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..core.config import settings
from ..database import get_db
from ..exceptions import InvalidInputError, PayloadTooLargeError
from ..models.item import ItemType
from ..schemas.common import DeletionReport, Envelope, PageParams
from ..schemas.item import ItemCreate, ItemPage, ItemResponse, ItemUpdate
from ..services.file_service import UploadPayload
from ..services.item_service import ItemService, RECENT_ITEMS_DEFAULT_LIMIT
from ..storage import ObjectStorage, get_storage
from .common import API_PREFIX, page_params, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_PREFIX}/items", tags=["items"])


def _item(item) -> ItemResponse:
    return ItemResponse.model_validate(item)


def _read_upload(file: Optional[UploadFile]) -> Optional[UploadPayload]:
    """Read the multipart file part, refusing anything over MAX_UPLOAD_BYTES."""
    if file is None:
        return None
    limit = settings.max_upload_bytes
    data = file.file.read(limit + 1)
    if len(data) > limit:
        raise PayloadTooLargeError(file.size or len(data), limit)
    return UploadPayload(
        data=data,
        original_filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
    )


@router.post("", response_model=Envelope[ItemResponse], status_code=201)
def create_item(
    data: ItemCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    item = ItemService(db).create_item(auth.user_id, data)
    return success(_item(item), "Item created successfully")


@router.post("/upload", response_model=Envelope[ItemResponse], status_code=201)
def upload_file_item(
    name: str = Form(..., max_length=255),
    type: ItemType = Form(...),
    description: Optional[str] = Form(None),
    folder_id: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    storage: ObjectStorage = Depends(get_storage),
):
    """Multipart upload. The binary is stored first, then recorded as a File and an Item."""
    if not name.strip():
        raise InvalidInputError("Name cannot be empty", field="name")
    payload = _read_upload(file)
    item = ItemService(db, storage).upload_file_item(
        auth.user_id,
        name=name.strip(),
        item_type=type,
        payload=payload,
        description=description,
        folder_id=folder_id or None,
    )
    return success(_item(item), "File uploaded successfully")


@router.get("", response_model=Envelope[ItemPage])
def list_items(
    params: PageParams = Depends(page_params),
    folder_id: Optional[str] = Query(None),
    type: Optional[ItemType] = Query(None),
    favorites: Optional[bool] = Query(None, description="Omit for no favorite filter"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    page = ItemService(db).list_items(
        auth.user_id, params, folder_id=folder_id, item_type=type, favorites=favorites
    )
    return success(page, "Items retrieved successfully")


@router.get("/recent", response_model=Envelope[List[ItemResponse]])
def recent_items(
    limit: int = Query(RECENT_ITEMS_DEFAULT_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    items = ItemService(db).recent_items(auth.user_id, limit)
    return success([_item(i) for i in items], "Recent items retrieved successfully")


@router.get("/{item_id}", response_model=Envelope[ItemResponse])
def get_item(
    item_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    item = ItemService(db).get_item(auth.user_id, item_id)
    return success(_item(item), "Item retrieved successfully")


@router.patch("/{item_id}", response_model=Envelope[ItemResponse])
def update_item(
    item_id: str,
    data: ItemUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Partial update. Send ``folder_id: null`` to move the item to the root level."""
    item = ItemService(db).update_item(auth.user_id, item_id, data)
    return success(_item(item), "Item updated successfully")


@router.delete("/{item_id}", response_model=Envelope[Optional[DeletionReport]])
def delete_item(
    item_id: str,
    permanent: bool = Query(False),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    storage: ObjectStorage = Depends(get_storage),
):
    report = ItemService(db, storage).delete_item(auth.user_id, item_id, permanent)
    message = "Item permanently deleted" if permanent else "Item moved to trash"
    return success(report, message)


@router.post("/{item_id}/favorite", response_model=Envelope[ItemResponse])
def toggle_item_favorite(
    item_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    item = ItemService(db).toggle_favorite(auth.user_id, item_id)
    state = "added to" if item.is_favorite else "removed from"
    return success(_item(item), f"Item {state} favorites")


@router.post("/{item_id}/duplicate", response_model=Envelope[ItemResponse], status_code=201)
def duplicate_item(
    item_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    item = ItemService(db).duplicate_item(auth.user_id, item_id)
    return success(_item(item), "Item duplicated successfully")
