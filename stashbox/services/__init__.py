"""Domain services. Each takes the acting owner's id explicitly."""

from .file_service import FileService, UploadPayload
from .folder_service import FolderService
from .item_service import ItemService
from .search_service import SearchService
from .stats_service import StatsService, STORAGE_CAPACITY_BYTES
from .trash_service import TrashService

__all__ = [
    "FileService",
    "UploadPayload",
    "FolderService",
    "ItemService",
    "SearchService",
    "StatsService",
    "STORAGE_CAPACITY_BYTES",
    "TrashService",
]
