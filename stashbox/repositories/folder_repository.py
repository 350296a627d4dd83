"""Folder queries: hierarchy listing, child counts, favorites, trash, search."""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_

from ..exceptions import FolderNotFoundError
from ..models import Folder, Item
from .base import BaseRepository, escape_like


class FolderRepository(BaseRepository[Folder]):
    """Persistence gateway for folders."""

    model_class = Folder
    not_found_error = FolderNotFoundError

    def list_children(self, owner_id: str, parent_id: Optional[str]) -> List[Folder]:
        """Live direct children of *parent_id* (root level when None), newest first."""
        query = self._live(owner_id)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        return query.order_by(Folder.created_at.desc(), Folder.id).all()

    def count_children(self, owner_id: str, folder_ids: Sequence[str]) -> Dict[str, Tuple[int, int]]:
        """Map folder id -> (live subfolder count, live item count)."""
        if not folder_ids:
            return {}

        subfolders = dict(
            self.db.query(Folder.parent_id, func.count(Folder.id))
            .filter(
                Folder.owner_id == owner_id,
                Folder.is_deleted.is_(False),
                Folder.parent_id.in_(folder_ids),
            )
            .group_by(Folder.parent_id)
            .all()
        )
        items = dict(
            self.db.query(Item.folder_id, func.count(Item.id))
            .filter(
                Item.owner_id == owner_id,
                Item.is_deleted.is_(False),
                Item.folder_id.in_(folder_ids),
            )
            .group_by(Item.folder_id)
            .all()
        )
        return {fid: (subfolders.get(fid, 0), items.get(fid, 0)) for fid in folder_ids}

    def list_favorites(self, owner_id: str) -> List[Folder]:
        return (
            self._live(owner_id)
            .filter(Folder.is_favorite.is_(True))
            .order_by(Folder.updated_at.desc())
            .all()
        )

    def list_trashed(self, owner_id: str) -> List[Folder]:
        return self._trashed(owner_id).order_by(Folder.updated_at.desc()).all()

    def search(self, owner_id: str, term: str, limit: int) -> List[Folder]:
        """Case-insensitive substring match on name or description."""
        pattern = f"%{escape_like(term)}%"
        return (
            self._live(owner_id)
            .filter(
                or_(
                    Folder.name.ilike(pattern, escape="\\"),
                    Folder.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Folder.updated_at.desc())
            .limit(limit)
            .all()
        )
