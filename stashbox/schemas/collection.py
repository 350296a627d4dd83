"""Mixed folder/item result sets: favorites, trash and search."""

from enum import Enum
from typing import List

from pydantic import BaseModel

from .common import PaginationMeta
from .folder import FolderResponse
from .item import ItemResponse


class FolderItemCollection(BaseModel):
    folders: List[FolderResponse] = []
    items: List[ItemResponse] = []


class SearchResults(FolderItemCollection):
    """Folders are capped at ``limit``; only items are paginated."""
    pagination: PaginationMeta


class TrashEntityType(str, Enum):
    """What a trash restore targets."""
    FOLDER = "folder"
    ITEM = "item"
