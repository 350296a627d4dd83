"""Pydantic schemas for API validation."""

from .common import (
    DeletionReport,
    Envelope,
    PageParams,
    PaginationMeta,
    SortBy,
    SortOrder,
    StorageFailure,
)
from .item import FileResponse, ItemCreate, ItemPage, ItemResponse, ItemUpdate
from .folder import (
    FolderCreate,
    FolderDetail,
    FolderResponse,
    FolderSummary,
    FolderUpdate,
)
from .collection import FolderItemCollection, SearchResults, TrashEntityType
from .stats import ItemTypeStats, StorageStats

__all__ = [
    "DeletionReport",
    "Envelope",
    "PageParams",
    "PaginationMeta",
    "SortBy",
    "SortOrder",
    "StorageFailure",
    "FileResponse",
    "ItemCreate",
    "ItemPage",
    "ItemResponse",
    "ItemUpdate",
    "FolderCreate",
    "FolderDetail",
    "FolderResponse",
    "FolderSummary",
    "FolderUpdate",
    "FolderItemCollection",
    "SearchResults",
    "TrashEntityType",
    "ItemTypeStats",
    "StorageStats",
]
