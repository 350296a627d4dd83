"""Item and file schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.item import ItemType
from .common import PaginationMeta


def _strip_name(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("Name cannot be null")
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    return v


class ItemCreate(BaseModel):
    """Schema for creating a note, link or other inline item."""
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    type: ItemType
    content: Optional[str] = None
    folder_id: Optional[str] = None
    tags: List[str] = []

    validate_name = field_validator("name")(_strip_name)


class ItemUpdate(BaseModel):
    """Partial update. Only fields present in the request body change.

    ``folder_id: null`` moves the item to the root level; ``name`` and
    ``tags`` may be omitted but not nulled.
    """
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    content: Optional[str] = None
    folder_id: Optional[str] = None
    tags: Optional[List[str]] = None

    validate_name = field_validator("name")(_strip_name)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> List[str]:
        if v is None:
            raise ValueError("Tags cannot be null; send [] to clear them")
        return v


class FileResponse(BaseModel):
    """Stored binary attached to a file item."""
    id: str
    filename: str
    original_filename: str
    url: str
    file_type: str
    mime_type: str
    size: int

    model_config = {"from_attributes": True}


class FolderRef(BaseModel):
    """Minimal folder view embedded in item responses."""
    id: str
    name: str

    model_config = {"from_attributes": True}


class ItemResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    type: ItemType
    content: Optional[str] = None
    file_id: Optional[str] = None
    folder_id: Optional[str] = None
    tags: List[str] = []
    size: int = 0
    is_favorite: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    file: Optional[FileResponse] = None
    folder: Optional[FolderRef] = None

    model_config = {"from_attributes": True}


class ItemPage(BaseModel):
    """One page of items plus pagination metadata."""
    items: List[ItemResponse]
    pagination: PaginationMeta
