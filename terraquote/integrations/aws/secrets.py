"""AWS Secrets Manager client with a per-instance cache.

Each secret is fetched at most once per SecretsClient lifetime. The
instance is owned by QuoteServices, so the cache lives as long as the
process does.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

_BOTO_CFG = Config(
    retries={"max_attempts": 3, "mode": "standard"},
    connect_timeout=3,
    read_timeout=10,
)


class SecretError(RuntimeError):
    """Raised when a secret exists but carries no usable JSON payload."""


class SecretsClient:
    """Thin async wrapper around `secretsmanager.get_secret_value`."""

    def __init__(self, region_name: str, client: Any | None = None) -> None:
        self._region_name = region_name
        self._client = client
        self._cache: dict[str, dict[str, Any]] = {}

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("secretsmanager", region_name=self._region_name, config=_BOTO_CFG)
            logger.info("Secrets Manager client initialized region=%s", self._region_name)
        return self._client

    async def get_json(self, secret_id: str) -> dict[str, Any]:
        """Return the secret's SecretString parsed as a JSON object."""
        cached = self._cache.get(secret_id)
        if cached is not None:
            return cached

        logger.info("Fetching secret %r from Secrets Manager", secret_id)
        response = await asyncio.to_thread(self._get_client().get_secret_value, SecretId=secret_id)

        secret_string = response.get("SecretString")
        if not secret_string:
            msg = f"Secret {secret_id!r} has no SecretString"
            raise SecretError(msg)
        try:
            payload = json.loads(secret_string)
        except json.JSONDecodeError as exc:
            msg = f"Secret {secret_id!r} is not valid JSON"
            raise SecretError(msg) from exc
        if not isinstance(payload, dict):
            msg = f"Secret {secret_id!r} is not a JSON object"
            raise SecretError(msg)

        self._cache[secret_id] = payload
        return payload
