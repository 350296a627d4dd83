"""S3-compatible object storage (AWS S3, MinIO, Cloudflare R2)."""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import StorageError
from .base import StoredObject

logger = logging.getLogger(__name__)


class S3ObjectStorage:
    """Stores payloads under ``{folder}/{filename}`` in a single bucket.

    The object key doubles as the external ref. URLs point at
    ``public_base_url`` when one is configured, otherwise at the endpoint.
    """

    def __init__(
        self,
        bucket: str,
        client=None,
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    def _url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        endpoint = self.client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket}/{key}"

    def upload(
        self,
        data: bytes,
        folder: str,
        resource_kind: str,
        filename: str,
        content_type: str,
    ) -> StoredObject:
        key = f"{folder}/{filename}"
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
                Metadata={"resource-kind": resource_kind},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to upload object to storage",
                extra={"bucket": self.bucket, "external_ref": key, "error": str(e)},
            )
            raise StorageError("upload", e) from e

        logger.info("Uploaded object", extra={"external_ref": key, "size": len(data)})
        return StoredObject(url=self._url_for(key), external_ref=key)

    def remove(self, external_ref: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=external_ref)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to remove object from storage",
                extra={"bucket": self.bucket, "external_ref": external_ref, "error": str(e)},
            )
            raise StorageError("remove", e) from e

        logger.info("Removed object", extra={"external_ref": external_ref})
