"""Database models."""

from .folder import Folder
from .file import File
from .item import Item, ItemType

__all__ = ["Folder", "File", "Item", "ItemType"]
