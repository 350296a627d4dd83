"""Storage statistics schemas."""

from typing import List

from pydantic import BaseModel


class ItemTypeStats(BaseModel):
    type: str
    count: int
    size: int
    size_gb: str


class StorageStats(BaseModel):
    """Quota report. ``available_storage`` goes negative once usage exceeds the quota."""
    total_storage: int
    used_storage: int
    available_storage: int
    total_storage_gb: str
    used_storage_gb: str
    available_storage_gb: str
    item_stats: List[ItemTypeStats] = []
    folder_count: int
