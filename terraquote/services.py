"""Collaborators shared across requests.

One QuoteServices instance is created per process by the FastAPI lifespan
and handed to each operation. It owns the secrets cache, the connection
pool and the storage client.
"""

from __future__ import annotations

import logging

from terraquote.config import Settings
from terraquote.db.engine import Database
from terraquote.integrations.aws.secrets import SecretsClient
from terraquote.repositories.tariffs import TariffRepository
from terraquote.schemas.quote import TariffDescriptor
from terraquote.storage.documents import DocumentStorage

logger = logging.getLogger(__name__)


class QuoteServices:
    """Process-lifetime collaborators for quote generation."""

    def __init__(self, config: Settings) -> None:
        self.config = config
        self.secrets = SecretsClient(region_name=config.aws.aws_region)
        self.database = Database(config.db, self.secrets)
        self.storage = DocumentStorage(config.storage, self.secrets, region_name=config.aws.aws_region)
        self.tariffs = TariffRepository(self.database)

    async def start(self) -> None:
        """Open the connection pool and the storage client."""
        await self.database.init()
        logger.info("Database connected")
        await self.storage.init()
        logger.info("Storage client ready")

    async def close(self) -> None:
        await self.database.close()

    async def tariff_lookup(self, tariff_id: int) -> TariffDescriptor | None:
        return await self.tariffs.get_by_id(tariff_id)
