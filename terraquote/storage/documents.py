"""Object storage for generated quote documents (S3, or local disk in dev)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import boto3
from botocore.config import Config

from terraquote.config import StorageSettings
from terraquote.integrations.aws.secrets import SecretsClient
from terraquote.quotes.errors import InvalidIdentifierError
from terraquote.schemas.quote import QuoteRecord, StoredDocument

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

_BOTO_CFG = Config(
    signature_version="s3v4",
    s3={"addressing_style": "virtual"},
    retries={"max_attempts": 5, "mode": "standard"},
    connect_timeout=3,
    read_timeout=10,
)


class StorageConfigError(RuntimeError):
    """Raised when no bucket can be determined."""


class StorageNotInitializedError(RuntimeError):
    """Raised when uploading before `DocumentStorage.init()`."""


class UnsafeStorageKeyError(RuntimeError):
    """Raised when a key would resolve outside the local storage root."""


def _check_key_segment(field: str, value: str) -> str:
    if not value or "/" in value or "\\" in value or ".." in value:
        raise InvalidIdentifierError(field, value)
    return value


def build_quote_key(record: QuoteRecord, epoch_ms: int) -> str:
    """Object key for a quote PDF.

    Prospects without a CRM record yet (prospect id "0") are filed under
    their terralink id instead. The id becomes one key segment, so ids
    holding path separators or ".." raise InvalidIdentifierError.
    """
    if record.files_under_terralink:
        terralink_id = _check_key_segment("terralink_id", record.terralink_id)
        return f"terralink/{terralink_id}/quote/{epoch_ms}.pdf"
    prospect_id = _check_key_segment("prospect_id", record.prospect_id)
    return f"prospect/{prospect_id}/quote/{epoch_ms}.pdf"


class DocumentStorage:
    """Uploads documents to the configured bucket."""

    def __init__(
        self,
        config: StorageSettings,
        secrets: SecretsClient,
        region_name: str,
        client: Any | None = None,
    ) -> None:
        self._config = config
        self._secrets = secrets
        self._region_name = region_name
        self._client = client
        self._bucket: str | None = None

    @property
    def bucket(self) -> str | None:
        return self._bucket

    async def init(self) -> None:
        """Resolve the bucket name and create the S3 client. Idempotent."""
        if self._bucket is not None:
            logger.debug("Storage already initialized for bucket %s", self._bucket)
            return

        bucket = await self._resolve_bucket()
        if not self._config.use_local_storage and self._client is None:
            self._client = boto3.client("s3", region_name=self._region_name, config=_BOTO_CFG)
        self._bucket = bucket
        mode = "local" if self._config.use_local_storage else "s3"
        logger.info("Document storage initialized bucket=%s mode=%s", bucket, mode)

    async def upload(self, key: str, body: bytes, content_type: str = PDF_CONTENT_TYPE) -> StoredDocument:
        """Store `body` under `key` and return a reference to it."""
        if self._bucket is None:
            msg = "Document storage is not initialized. Call DocumentStorage.init() at startup."
            raise StorageNotInitializedError(msg)

        if self._config.use_local_storage:
            return self._write_local(key, body)

        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except Exception:
            logger.exception("Error uploading %s to bucket %s", key, self._bucket)
            raise

        url = f"https://{self._bucket}.s3.{self._region_name}.amazonaws.com/{key}"
        logger.info("Uploaded %s (%d bytes)", url, len(body))
        return StoredDocument(bucket=self._bucket, key=key, url=url)

    def _write_local(self, key: str, body: bytes) -> StoredDocument:
        bucket_dir = (Path(self._config.local_storage_root) / self._bucket).resolve()
        path = (bucket_dir / key).resolve()
        if not path.is_relative_to(bucket_dir):
            msg = f"Key {key!r} resolves outside {bucket_dir}"
            raise UnsafeStorageKeyError(msg)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)
        logger.info("Wrote %s (%d bytes)", path, len(body))
        return StoredDocument(bucket=self._bucket, key=key, url=f"file://{path}")

    async def _resolve_bucket(self) -> str:
        """Bucket from S3_SECRET_NAME when set, else S3_BUCKET_NAME."""
        config = self._config
        if config.s3_secret_name:
            secret = await self._secrets.get_json(config.s3_secret_name)
            bucket = secret.get("bucketName")
            if not bucket:
                msg = f"Secret {config.s3_secret_name!r} has no 'bucketName'"
                raise StorageConfigError(msg)
            return str(bucket)
        if config.s3_bucket_name:
            return config.s3_bucket_name
        msg = "Neither S3_BUCKET_NAME nor S3_SECRET_NAME is configured"
        raise StorageConfigError(msg)
