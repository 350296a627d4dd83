"""Storage quota reporting. The quota is reported, never enforced."""

from sqlalchemy.orm import Session

from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..schemas.stats import ItemTypeStats, StorageStats

GIB = 1024 ** 3
STORAGE_CAPACITY_BYTES = 15 * GIB


def format_gb(size_bytes: int) -> str:
    """Bytes as GiB with two decimals, e.g. ``"15.00"``."""
    return f"{size_bytes / GIB:.2f}"


class StatsService:
    def __init__(self, db: Session):
        self.folder_repo = FolderRepository(db)
        self.item_repo = ItemRepository(db)

    def storage_stats(self, owner_id: str) -> StorageStats:
        used = self.item_repo.sum_size_by_owner(owner_id)
        available = STORAGE_CAPACITY_BYTES - used
        return StorageStats(
            total_storage=STORAGE_CAPACITY_BYTES,
            used_storage=used,
            available_storage=available,
            total_storage_gb=format_gb(STORAGE_CAPACITY_BYTES),
            used_storage_gb=format_gb(used),
            available_storage_gb=format_gb(available),
            item_stats=[
                ItemTypeStats(type=item_type, count=count, size=size, size_gb=format_gb(size))
                for item_type, count, size in self.item_repo.group_by_type(owner_id)
            ],
            folder_count=self.folder_repo.count_live(owner_id),
        )
