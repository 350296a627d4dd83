"""Read-only cross-entity views: search and favorites."""

from sqlalchemy.orm import Session

from ..exceptions import InvalidInputError
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..schemas.collection import FolderItemCollection, SearchResults
from ..schemas.common import PaginationMeta
from ..schemas.folder import FolderResponse
from ..schemas.item import ItemResponse


class SearchService:
    """Substring/tag search and the favorites view. No ranking."""

    def __init__(self, db: Session):
        self.folder_repo = FolderRepository(db)
        self.item_repo = ItemRepository(db)

    def search(self, owner_id: str, term: str, page: int = 1, limit: int = 10) -> SearchResults:
        """Folders match on name/description and are capped at *limit*.

        Items match on name/description/content, or when *term* is exactly
        one of their tags, and are paginated.
        """
        term = (term or "").strip()
        if not term:
            raise InvalidInputError("Search term is required", field="q")

        folders = self.folder_repo.search(owner_id, term, limit)
        items, total = self.item_repo.search(owner_id, term, (page - 1) * limit, limit)
        return SearchResults(
            folders=[FolderResponse.model_validate(f) for f in folders],
            items=[ItemResponse.model_validate(i) for i in items],
            pagination=PaginationMeta.build(page, limit, total),
        )

    def favorites(self, owner_id: str) -> FolderItemCollection:
        return FolderItemCollection(
            folders=[FolderResponse.model_validate(f) for f in self.folder_repo.list_favorites(owner_id)],
            items=[ItemResponse.model_validate(i) for i in self.item_repo.list_favorites(owner_id)],
        )
