"""Async database engine and transaction management.

Uses SQLAlchemy 2.0 async (asyncpg driver by default). Credentials are
fetched from Secrets Manager on `init()`; the engine's connection pool is
owned by one Database instance, created and closed by the process entry
point (see terraquote.services).
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from terraquote.config import DatabaseSettings
from terraquote.integrations.aws.secrets import SecretsClient

logger = logging.getLogger(__name__)


class DatabaseNotInitializedError(RuntimeError):
    """Raised when a transaction is requested before `Database.init()`."""


class Database:
    """Connection pool plus session factory for the relational store."""

    def __init__(self, config: DatabaseSettings, secrets: SecretsClient) -> None:
        self._config = config
        self._secrets = secrets
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    async def init(self) -> None:
        """Resolve credentials and create the connection pool. Idempotent."""
        if self._engine is not None:
            logger.debug("Connection pool already initialized")
            return

        url = await self._resolve_url()
        logger.info("Initializing connection pool host=%s database=%s", url.host, url.database)
        self._engine = create_async_engine(
            url,
            pool_size=self._config.pool_size,
            max_overflow=self._config.max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def close(self) -> None:
        """Dispose the engine and release every pooled connection."""
        if self._engine is None:
            return
        logger.info("Closing connection pool")
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @contextlib.asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session inside a transaction.

        Commits when the block exits cleanly; rolls back and re-raises
        otherwise. The connection goes back to the pool either way.

        Usage:
            async with database.transaction() as session:
                await session.execute(...)
        """
        if self._session_factory is None:
            msg = "Connection pool is not initialized. Call Database.init() at startup."
            raise DatabaseNotInitializedError(msg)

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                logger.warning("Transaction failed, rolling back")
                await session.rollback()
                raise

    async def _resolve_url(self) -> URL:
        """Build the connection URL from the DB secret, or fall back to DATABASE_URL."""
        config = self._config
        if not config.db_secret_name:
            logger.info("DB_SECRET_NAME not set, using DATABASE_URL")
            return make_url(config.database_url)

        secret = await self._secrets.get_json(config.db_secret_name)
        port = config.db_port or secret.get("port") or config.db_default_port
        return URL.create(
            drivername=config.db_driver,
            username=secret.get("username"),
            password=secret.get("password"),
            host=config.db_host or secret.get("host"),
            port=int(port),
            database=config.db_name or secret.get("dbname"),
        )
