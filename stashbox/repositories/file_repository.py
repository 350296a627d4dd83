"""File record access."""

from sqlalchemy.orm import Session

from ..models import File


class FileRepository:
    """Data access layer for stored-file metadata."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, file: File) -> File:
        self.db.add(file)
        self.db.flush()
        return file

    def delete(self, file: File) -> None:
        self.db.delete(file)
        self.db.flush()
