"""Data access repositories."""

from .base import BaseRepository
from .folder_repository import FolderRepository
from .item_repository import ItemRepository
from .file_repository import FileRepository

__all__ = [
    "BaseRepository",
    "FolderRepository",
    "ItemRepository",
    "FileRepository",
]
