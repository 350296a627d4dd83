"""Shared schemas: response envelope, pagination and deletion reports."""

from enum import Enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform success body: ``{data, message}``."""
    data: T
    message: str


class SortBy(str, Enum):
    """Item fields a listing may be sorted on."""
    NAME = "name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    SIZE = "size"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PageParams(BaseModel):
    """1-indexed pagination with a caller-chosen sort."""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    sort_by: SortBy = SortBy.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        # ceil without floats
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit))


class StorageFailure(BaseModel):
    """A storage object that could not be removed; its metadata was deleted anyway."""
    item_id: str
    external_ref: str


class DeletionReport(BaseModel):
    """Outcome of a permanent deletion or trash sweep."""
    deleted_folders: int = 0
    deleted_items: int = 0
    storage_failures: List[StorageFailure] = []
