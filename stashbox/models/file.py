"""File model: the stored binary behind a file-bearing item."""

from sqlalchemy import BigInteger, Column, DateTime, String, Text
from ..database import Base, utcnow


class File(Base):
    """Metadata for one object held by the storage provider."""

    __tablename__ = "files"

    id = Column(String(36), primary_key=True)
    owner_id = Column(String(255), nullable=False, index=True)

    # Generated unique name (uuid4 + original extension)
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(500), nullable=False)

    # Opaque provider key used for later removal
    external_ref = Column(String(1024), nullable=False)
    url = Column(Text, nullable=False)

    # Allowed values: image, video, audio, document
    file_type = Column(String(20), nullable=False)
    mime_type = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
