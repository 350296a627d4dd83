"""API routes."""

from .folders import router as folders_router
from .items import router as items_router
from .search import router as search_router
from .trash import router as trash_router

__all__ = [
    "folders_router",
    "items_router",
    "search_router",
    "trash_router",
]
