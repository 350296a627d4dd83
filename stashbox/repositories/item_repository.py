"""Item queries: filtered pagination, search, file references, aggregates."""

from typing import List, Optional, Tuple

from sqlalchemy import cast, func, or_, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Query

from ..database import is_postgresql
from ..exceptions import ItemNotFoundError
from ..models import Item
from ..schemas.common import SortBy, SortOrder
from .base import BaseRepository, escape_like

_SORT_COLUMNS = {
    SortBy.NAME: Item.name,
    SortBy.CREATED_AT: Item.created_at,
    SortBy.UPDATED_AT: Item.updated_at,
    SortBy.SIZE: Item.size,
}


class ItemRepository(BaseRepository[Item]):
    """Persistence gateway for items."""

    model_class = Item
    not_found_error = ItemNotFoundError

    @staticmethod
    def _paginate(query: Query, sort_by: SortBy, sort_order: SortOrder,
                  offset: int, limit: int) -> Tuple[List[Item], int]:
        total = query.order_by(None).count()
        column = _SORT_COLUMNS[sort_by]
        ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
        rows = query.order_by(ordering, Item.id).offset(offset).limit(limit).all()
        return rows, total

    def list_page(
        self,
        owner_id: str,
        sort_by: SortBy,
        sort_order: SortOrder,
        offset: int,
        limit: int,
        folder_id: Optional[str] = None,
        item_type: Optional[str] = None,
        favorites: Optional[bool] = None,
    ) -> Tuple[List[Item], int]:
        """Live items matching the optional equality filters. Returns (page, total)."""
        query = self._live(owner_id)
        if folder_id is not None:
            query = query.filter(Item.folder_id == folder_id)
        if item_type is not None:
            query = query.filter(Item.type == item_type)
        if favorites is not None:
            query = query.filter(Item.is_favorite.is_(favorites))
        return self._paginate(query, sort_by, sort_order, offset, limit)

    def list_recent(self, owner_id: str, limit: int) -> List[Item]:
        return self._live(owner_id).order_by(Item.updated_at.desc(), Item.id).limit(limit).all()

    def list_in_folder(self, owner_id: str, folder_id: str) -> List[Item]:
        return (
            self._live(owner_id)
            .filter(Item.folder_id == folder_id)
            .order_by(Item.created_at.desc(), Item.id)
            .all()
        )

    def list_favorites(self, owner_id: str) -> List[Item]:
        return (
            self._live(owner_id)
            .filter(Item.is_favorite.is_(True))
            .order_by(Item.updated_at.desc())
            .all()
        )

    def list_trashed(self, owner_id: str) -> List[Item]:
        return self._trashed(owner_id).order_by(Item.updated_at.desc()).all()

    def list_trashed_with_files(self, owner_id: str) -> List[Item]:
        return self._trashed(owner_id).filter(Item.file_id.isnot(None)).all()

    def _has_tag(self, term: str):
        """Exact membership of *term* in the JSON tags array."""
        if is_postgresql():
            return cast(Item.tags, JSONB).contains([term])
        return text(
            "EXISTS (SELECT 1 FROM json_each(items.tags) WHERE json_each.value = :tag)"
        ).bindparams(tag=term)

    def search(self, owner_id: str, term: str, offset: int, limit: int) -> Tuple[List[Item], int]:
        """Substring match on name/description/content, or exact tag match."""
        pattern = f"%{escape_like(term)}%"
        query = self._live(owner_id).filter(
            or_(
                Item.name.ilike(pattern, escape="\\"),
                Item.description.ilike(pattern, escape="\\"),
                Item.content.ilike(pattern, escape="\\"),
                self._has_tag(term),
            )
        )
        return self._paginate(query, SortBy.UPDATED_AT, SortOrder.DESC, offset, limit)

    def count_file_references(self, file_id: str, exclude_ids: Optional[List[str]] = None) -> int:
        """Items (any owner state) still pointing at *file_id*, minus *exclude_ids*."""
        query = self.db.query(Item).filter(Item.file_id == file_id)
        if exclude_ids:
            query = query.filter(Item.id.notin_(exclude_ids))
        return query.count()

    def sum_size_by_owner(self, owner_id: str) -> int:
        total = (
            self.db.query(func.coalesce(func.sum(Item.size), 0))
            .filter(Item.owner_id == owner_id, Item.is_deleted.is_(False))
            .scalar()
        )
        return int(total or 0)

    def group_by_type(self, owner_id: str) -> List[Tuple[str, int, int]]:
        """(type, count, summed size) for live items, one row per type present."""
        rows = (
            self.db.query(Item.type, func.count(Item.id), func.coalesce(func.sum(Item.size), 0))
            .filter(Item.owner_id == owner_id, Item.is_deleted.is_(False))
            .group_by(Item.type)
            .order_by(Item.type)
            .all()
        )
        return [(row[0], int(row[1]), int(row[2])) for row in rows]

    def count_all_live(self) -> int:
        """Live items across every owner (health reporting)."""
        return self.db.query(func.count(Item.id)).filter(Item.is_deleted.is_(False)).scalar() or 0
