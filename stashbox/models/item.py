"""Item model."""

from enum import Enum

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Index, JSON, String, Text
from sqlalchemy.orm import relationship
from ..database import Base, utcnow


class ItemType(str, Enum):
    """Content kind of an item."""
    NOTE = "NOTE"
    LINK = "LINK"
    IMAGE = "IMAGE"
    DOCUMENT = "DOCUMENT"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    FILE = "FILE"


class Item(Base):
    """A leaf content unit: note, link, or uploaded file."""

    __tablename__ = "items"
    __table_args__ = (
        Index("ix_items_owner_folder", "owner_id", "folder_id"),
        Index("ix_items_owner_deleted", "owner_id", "is_deleted"),
        Index("ix_items_file_id", "file_id"),
    )

    id = Column(String(36), primary_key=True)
    owner_id = Column(String(255), nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Stores an ItemType value
    type = Column(String(20), nullable=False)

    # Inline payload for notes/links; file items carry file_id instead
    content = Column(Text, nullable=True)
    file_id = Column(String(36), ForeignKey("files.id", ondelete="SET NULL"), nullable=True)

    # NULL = root level. Items of a hard-deleted folder fall back to root.
    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)

    # Ordered, duplicates allowed, no normalization
    tags = Column(JSON, nullable=False, default=list)
    size = Column(BigInteger, nullable=False, default=0)

    is_favorite = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Many-to-one only: deletes of folders/files are left to the FK rules.
    file = relationship("File", lazy="joined")
    folder = relationship("Folder", lazy="select")
