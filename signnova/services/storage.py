"""
Object storage for uploaded avatars and sign videos (S3-compatible, or in-memory).
"""

from __future__ import annotations

import logging
import mimetypes
import posixpath
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol
from uuid import uuid4

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from signnova.core.config import Settings
from signnova.core.errors import InternalServerError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 16 * 1024 * 1024


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload_bytes(self, key: str, data: bytes, content_type: str) -> str:
        """Store `data` under `key` and return its public URL."""
        ...


def read_limited(stream: BinaryIO, max_bytes: int) -> bytes:
    """Read at most one byte past `max_bytes`, so oversized uploads are caught without buffering them."""
    return stream.read(max_bytes + 1)


def build_object_key(prefix: str, owner_id: str, filename: str | None, content_type: str | None) -> str:
    extension = posixpath.splitext(filename or "")[1].lower()
    if not extension and content_type:
        extension = mimetypes.guess_extension(content_type) or ""
    return f"{prefix}/{owner_id}/{uuid4().hex}{extension}"


@dataclass
class InMemoryStorageClient:
    """Stand-in store used when no bucket is configured."""

    base_url: str = "https://storage.local"
    stored_objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def upload_bytes(self, key: str, data: bytes, content_type: str) -> str:
        self.stored_objects[key] = (data, content_type)
        return f"{self.base_url}/{key}"


@dataclass
class S3StorageClient:
    bucket: str
    region: str = ""
    endpoint: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    public_base_url: str = ""

    def __post_init__(self):
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=Config(signature_version="s3v4"),
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{key}"

    def upload_bytes(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Upload of %s to bucket %s failed", key, self.bucket)
            raise InternalServerError("Failed to upload file") from exc
        return self.public_url(key)


def build_storage_client(settings: Settings) -> StorageClient:
    if not settings.s3_bucket:
        logger.warning("S3_BUCKET is not set; uploads are kept in memory.")
        return InMemoryStorageClient()
    return S3StorageClient(
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        endpoint=settings.s3_endpoint,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        public_base_url=settings.storage_public_base_url,
    )
