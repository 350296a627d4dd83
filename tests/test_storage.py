"""Tests for upload classification and the S3 adapter (moto-backed)."""

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from stashbox.exceptions import StorageError
from stashbox.storage import (
    S3ObjectStorage,
    classify_file_type,
    generate_stored_filename,
    resource_kind_for,
    storage_folder_for,
)

BUCKET = "stashbox-test"


class TestClassification:

    @pytest.mark.parametrize("mime, expected", [
        ("image/png", ("image", "images", "image")),
        ("image/jpeg", ("image", "images", "image")),
        ("video/mp4", ("video", "videos", "video")),
        ("audio/mpeg", ("audio", "audios", "raw")),
        ("application/pdf", ("document", "documents", "raw")),
        ("text/plain", ("document", "documents", "raw")),
        ("", ("document", "documents", "raw")),
    ])
    def test_mime_categories(self, mime, expected):
        assert (classify_file_type(mime), storage_folder_for(mime), resource_kind_for(mime)) == expected

    def test_stored_filename_keeps_extension(self):
        name = generate_stored_filename("holiday.photo.JPG")
        assert name.endswith(".JPG")
        assert name.count(".") == 1

    def test_stored_filename_without_extension(self):
        assert "." not in generate_stored_filename("README")

    def test_stored_filenames_are_unique(self):
        assert generate_stored_filename("a.txt") != generate_stored_filename("a.txt")


@pytest.fixture()
def s3_client(monkeypatch):
    """Mocked S3 with an empty test bucket."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


class TestS3ObjectStorage:

    def test_upload_stores_object_under_folder(self, s3_client):
        storage = S3ObjectStorage(bucket=BUCKET, client=s3_client)

        stored = storage.upload(b"\x89PNG", "images", "image", "abc.png", "image/png")

        assert stored.external_ref == "images/abc.png"
        assert stored.url.endswith(f"/{BUCKET}/images/abc.png")
        obj = s3_client.get_object(Bucket=BUCKET, Key="images/abc.png")
        assert obj["Body"].read() == b"\x89PNG"
        assert obj["ContentType"] == "image/png"
        assert obj["Metadata"] == {"resource-kind": "image"}

    def test_public_base_url(self, s3_client):
        storage = S3ObjectStorage(bucket=BUCKET, client=s3_client, public_base_url="https://cdn.example.com/")
        stored = storage.upload(b"x", "documents", "raw", "f.pdf", "application/pdf")
        assert stored.url == "https://cdn.example.com/documents/f.pdf"

    def test_remove_deletes_object(self, s3_client):
        storage = S3ObjectStorage(bucket=BUCKET, client=s3_client)
        stored = storage.upload(b"x", "documents", "raw", "f.pdf", "application/pdf")

        storage.remove(stored.external_ref)

        with pytest.raises(ClientError):
            s3_client.head_object(Bucket=BUCKET, Key=stored.external_ref)

    def test_upload_to_missing_bucket_raises_storage_error(self, s3_client):
        storage = S3ObjectStorage(bucket="no-such-bucket", client=s3_client)
        with pytest.raises(StorageError) as exc:
            storage.upload(b"x", "documents", "raw", "f.pdf", "application/pdf")
        assert exc.value.status_code == 502
        assert exc.value.details == {"operation": "upload"}
        assert isinstance(exc.value.original_error, ClientError)

    def test_remove_from_missing_bucket_raises_storage_error(self, s3_client):
        storage = S3ObjectStorage(bucket="no-such-bucket", client=s3_client)
        with pytest.raises(StorageError):
            storage.remove("documents/f.pdf")
