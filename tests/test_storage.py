"""Tests for document storage.

Covers:
- Bucket resolution from S3_BUCKET_NAME and from the S3 secret
- S3 upload call and returned reference
- Local storage mode
- Object key filing rules
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from terraquote.config import StorageSettings
from terraquote.quotes.errors import InvalidIdentifierError
from terraquote.quotes.normalizer import normalize
from terraquote.storage.documents import (
    DocumentStorage,
    StorageConfigError,
    StorageNotInitializedError,
    UnsafeStorageKeyError,
    build_quote_key,
)

# ── Helpers ──────────────────────────────────────────────────────────


def _make_secrets(payload: dict | None = None) -> MagicMock:
    secrets = MagicMock()
    secrets.get_json = AsyncMock(return_value=payload or {})
    return secrets


def _make_storage(config: StorageSettings, secrets: MagicMock | None = None) -> tuple[DocumentStorage, MagicMock]:
    s3 = MagicMock()
    storage = DocumentStorage(config, secrets or _make_secrets(), region_name="us-east-1", client=s3)
    return storage, s3


# ── Bucket resolution ────────────────────────────────────────────────


class TestInit:
    @pytest.mark.asyncio()
    async def test_bucket_from_env(self):
        storage, _ = _make_storage(StorageSettings(s3_bucket_name="quotes-bucket", s3_secret_name=""))
        await storage.init()
        assert storage.bucket == "quotes-bucket"

    @pytest.mark.asyncio()
    async def test_bucket_from_secret(self):
        secrets = _make_secrets({"bucketName": "secret-bucket"})
        storage, _ = _make_storage(
            StorageSettings(s3_bucket_name="env-bucket", s3_secret_name="s3-config"), secrets
        )
        await storage.init()
        assert storage.bucket == "secret-bucket"
        secrets.get_json.assert_awaited_once_with("s3-config")

    @pytest.mark.asyncio()
    async def test_secret_without_bucket(self):
        storage, _ = _make_storage(StorageSettings(s3_secret_name="s3-config"), _make_secrets({"other": 1}))
        with pytest.raises(StorageConfigError, match="bucketName"):
            await storage.init()

    @pytest.mark.asyncio()
    async def test_nothing_configured(self):
        storage, _ = _make_storage(StorageSettings(s3_bucket_name="", s3_secret_name=""))
        with pytest.raises(StorageConfigError):
            await storage.init()


# ── Upload ───────────────────────────────────────────────────────────


class TestUpload:
    @pytest.mark.asyncio()
    async def test_upload_before_init(self):
        storage, _ = _make_storage(StorageSettings(s3_bucket_name="quotes-bucket"))
        with pytest.raises(StorageNotInitializedError):
            await storage.upload("k.pdf", b"%PDF")

    @pytest.mark.asyncio()
    async def test_s3_upload(self):
        storage, s3 = _make_storage(StorageSettings(s3_bucket_name="quotes-bucket", s3_secret_name=""))
        await storage.init()

        stored = await storage.upload("prospect/1/quote/5.pdf", b"%PDF-1.4")

        s3.put_object.assert_called_once_with(
            Bucket="quotes-bucket",
            Key="prospect/1/quote/5.pdf",
            Body=b"%PDF-1.4",
            ContentType="application/pdf",
        )
        assert stored.bucket == "quotes-bucket"
        assert stored.key == "prospect/1/quote/5.pdf"
        assert stored.url == "https://quotes-bucket.s3.us-east-1.amazonaws.com/prospect/1/quote/5.pdf"

    @pytest.mark.asyncio()
    async def test_s3_error_propagates(self):
        storage, s3 = _make_storage(StorageSettings(s3_bucket_name="quotes-bucket", s3_secret_name=""))
        s3.put_object.side_effect = RuntimeError("AccessDenied")
        await storage.init()

        with pytest.raises(RuntimeError, match="AccessDenied"):
            await storage.upload("k.pdf", b"%PDF")

    @pytest.mark.asyncio()
    async def test_local_mode(self, tmp_path):
        config = StorageSettings(
            s3_bucket_name="quotes-bucket",
            s3_secret_name="",
            use_local_storage=True,
            local_storage_root=str(tmp_path),
        )
        storage, s3 = _make_storage(config)
        await storage.init()

        stored = await storage.upload("terralink/TL-9/quote/5.pdf", b"%PDF-1.4")

        path = tmp_path / "quotes-bucket" / "terralink" / "TL-9" / "quote" / "5.pdf"
        assert path.read_bytes() == b"%PDF-1.4"
        assert stored.url.startswith("file://")
        s3.put_object.assert_not_called()

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("key", ["../../../escaped/quote/1.pdf", "../other-bucket/quote/1.pdf", "/etc/quote.pdf"])
    async def test_local_mode_rejects_keys_outside_bucket(self, tmp_path, key):
        root = tmp_path / "out"
        config = StorageSettings(
            s3_bucket_name="quotes-bucket",
            s3_secret_name="",
            use_local_storage=True,
            local_storage_root=str(root),
        )
        storage, _ = _make_storage(config)
        await storage.init()

        with pytest.raises(UnsafeStorageKeyError):
            await storage.upload(key, b"%PDF-1.4")

        assert list(tmp_path.rglob("*.pdf")) == []


# ── Keys ─────────────────────────────────────────────────────────────


class TestBuildQuoteKey:
    def test_prospect(self):
        record = normalize({"prospect_id": "1234", "terralink_id": "TL-9"})
        assert build_quote_key(record, 1700) == "prospect/1234/quote/1700.pdf"

    def test_sentinel(self):
        record = normalize({"prospect_id": "0", "terralink_id": "TL-9"})
        assert build_quote_key(record, 1700) == "terralink/TL-9/quote/1700.pdf"

    @pytest.mark.parametrize("terralink_id", ["../../../escaped", "TL/9", "TL\\9", ".."])
    def test_sentinel_rejects_unsafe_terralink_id(self, terralink_id):
        record = normalize({"prospect_id": "0", "terralink_id": terralink_id})
        with pytest.raises(InvalidIdentifierError) as exc_info:
            build_quote_key(record, 1700)
        assert exc_info.value.field == "terralink_id"

    @pytest.mark.parametrize("prospect_id", ["12/34", "../1234"])
    def test_rejects_unsafe_prospect_id(self, prospect_id):
        record = normalize({"prospect_id": prospect_id, "terralink_id": "TL-9"})
        with pytest.raises(InvalidIdentifierError) as exc_info:
            build_quote_key(record, 1700)
        assert exc_info.value.field == "prospect_id"

    def test_dots_inside_an_id_are_allowed(self):
        record = normalize({"prospect_id": "12.34", "terralink_id": "TL-9"})
        assert build_quote_key(record, 1700) == "prospect/12.34/quote/1700.pdf"
