"""Folder model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from ..database import Base, utcnow


class Folder(Base):
    """A hierarchical container for items and subfolders, owned by one user."""

    __tablename__ = "folders"
    __table_args__ = (
        Index("ix_folders_owner_parent", "owner_id", "parent_id"),
        Index("ix_folders_owner_deleted", "owner_id", "is_deleted"),
    )

    # Primary key (UUID4 string)
    id = Column(String(36), primary_key=True)
    owner_id = Column(String(255), nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(50), nullable=True)

    # NULL = root level. Subfolders of a hard-deleted folder fall back to root.
    parent_id = Column(String(36), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)

    is_favorite = Column(Boolean, nullable=False, default=False)
    # Soft delete (trash)
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
