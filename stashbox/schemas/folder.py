"""Folder schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .item import ItemResponse


class FolderCreate(BaseModel):
    """Schema for creating a folder."""
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=50)
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class FolderUpdate(BaseModel):
    """Partial update. ``parent_id: null`` moves the folder to the root level."""
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=50)
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Name cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class FolderResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None
    is_favorite: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FolderCounts(BaseModel):
    """Live children of a folder."""
    subfolders: int = 0
    items: int = 0


class FolderSummary(FolderResponse):
    """Folder listing entry annotated with live child counts."""
    counts: FolderCounts = FolderCounts()


class FolderDetail(FolderResponse):
    """A folder with its parent and its live subfolders and items."""
    parent: Optional[FolderResponse] = None
    subfolders: List[FolderResponse] = []
    items: List[ItemResponse] = []
