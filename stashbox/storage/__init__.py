"""Object storage adapters."""

from functools import lru_cache

from ..core.config import settings
from .base import (
    ObjectStorage,
    StoredObject,
    classify_file_type,
    generate_stored_filename,
    resource_kind_for,
    storage_folder_for,
)
from .s3 import S3ObjectStorage


@lru_cache
def get_storage() -> ObjectStorage:
    """FastAPI dependency: the process-wide storage adapter built from settings."""
    return S3ObjectStorage(
        bucket=settings.storage_bucket,
        endpoint_url=settings.storage_endpoint_url,
        region=settings.storage_region,
        access_key_id=settings.storage_access_key_id,
        secret_access_key=settings.storage_secret_access_key,
        public_base_url=settings.storage_public_base_url,
    )


__all__ = [
    "ObjectStorage",
    "StoredObject",
    "S3ObjectStorage",
    "classify_file_type",
    "generate_stored_filename",
    "resource_kind_for",
    "storage_folder_for",
    "get_storage",
]
