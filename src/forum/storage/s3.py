"""
Object storage for user uploads.

Clients never send file bytes through the API. They ask for a presigned PUT
URL scoped to ``{user_id}/{file_name}`` and upload straight to the bucket.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache

import aioboto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from forum.config import get_settings
from forum.errors import InternalError, ValidationError

logger = structlog.get_logger()

PRESIGN_FAILED = "failed to generate presigned URL"


class StorageError(InternalError):
    """The storage provider could not fulfil a request."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or PRESIGN_FAILED)


class BaseStorageProvider(ABC):
    """Abstract base class for upload URL providers."""

    @abstractmethod
    async def create_presigned_upload_url(self, key: str, expires_in: int) -> str:
        """Return a URL that accepts a single PUT of ``key`` for ``expires_in`` seconds."""
        ...


class S3StorageProvider(BaseStorageProvider):
    """Presign S3 PUT requests with aioboto3."""

    def __init__(self, bucket: str, region: str) -> None:
        self.bucket = bucket
        self.region = region
        self._session = aioboto3.Session()

    async def create_presigned_upload_url(self, key: str, expires_in: int) -> str:
        try:
            async with self._session.client("s3", region_name=self.region) as s3:
                url: str = await s3.generate_presigned_url(
                    "put_object",
                    Params={"Bucket": self.bucket, "Key": key},
                    ExpiresIn=expires_in,
                )
        except (BotoCoreError, ClientError) as e:
            logger.exception("presign_failed", bucket=self.bucket, key=key)
            raise StorageError from e
        logger.info("presign_issued", bucket=self.bucket, key=key, expires_in=expires_in)
        return url


@lru_cache
def get_storage() -> BaseStorageProvider:
    """Storage provider dependency. Overridden in tests."""
    settings = get_settings()
    return S3StorageProvider(bucket=settings.s3_bucket, region=settings.s3_region)


def upload_key(user_id: int, file_name: str) -> str:
    """Object key for a user's upload. Raises ValidationError on an unusable file name."""
    file_name = file_name.strip()
    if not file_name:
        msg = "file_name is required"
        raise ValidationError(msg)
    if "/" in file_name or "\\" in file_name or file_name in {".", ".."}:
        msg = "file_name must not contain path separators"
        raise ValidationError(msg)
    return f"{user_id}/{file_name}"
