"""Base repository with owner-scoped lookups.

Every query starts from ``_owned(owner_id)`` so rows belonging to another
user are indistinguishable from missing ones. Subclasses set model_class and
not_found_error; the base provides live / any-state / trashed lookups.

Repositories flush but never commit: services own the transaction.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from ..database import Base
from ..exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally. Pair with ``escape="\\"``."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for soft-deletable, owner-scoped models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., Folder)
        not_found_error: Exception class raised by the get_* helpers
    """

    model_class: Type[ModelT]
    not_found_error: Type[NotFoundError]

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, owner_id: str) -> Query:
        return self.db.query(self.model_class).filter(self.model_class.owner_id == owner_id)

    def _live(self, owner_id: str) -> Query:
        return self._owned(owner_id).filter(self.model_class.is_deleted.is_(False))

    def _trashed(self, owner_id: str) -> Query:
        return self._owned(owner_id).filter(self.model_class.is_deleted.is_(True))

    def get_live_optional(self, owner_id: str, entity_id: str) -> Optional[ModelT]:
        return self._live(owner_id).filter(self.model_class.id == entity_id).first()

    def get_live(self, owner_id: str, entity_id: str) -> ModelT:
        """Get a non-deleted entity. Raises not_found_error if absent, trashed or foreign."""
        entity = self.get_live_optional(owner_id, entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_any_optional(self, owner_id: str, entity_id: str) -> Optional[ModelT]:
        return self._owned(owner_id).filter(self.model_class.id == entity_id).first()

    def get_any(self, owner_id: str, entity_id: str) -> ModelT:
        """Get an entity in either deletion state."""
        entity = self.get_any_optional(owner_id, entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_trashed_optional(self, owner_id: str, entity_id: str) -> Optional[ModelT]:
        return self._trashed(owner_id).filter(self.model_class.id == entity_id).first()

    def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()

    def count_live(self, owner_id: str) -> int:
        return self._live(owner_id).count()

    def delete_trashed(self, owner_id: str) -> int:
        """Hard-delete every trashed row of this owner. Returns the row count."""
        return self._trashed(owner_id).delete(synchronize_session=False)
