"""Tariff catalog lookups against the relational store."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from terraquote.db.engine import Database
from terraquote.models.tariff import CfeTariff
from terraquote.schemas.quote import TariffDescriptor

logger = logging.getLogger(__name__)


class TariffLookupError(RuntimeError):
    """Raised when the tariff catalog could not be queried."""


class TariffRepository:
    """Point lookups on the `cfe_tariffs` table."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def get_by_id(self, tariff_id: int) -> TariffDescriptor | None:
        """Return the tariff with this primary key, or None if it does not exist."""
        logger.info("Looking up CFE tariff %s", tariff_id)
        try:
            async with self._database.transaction() as session:
                result = await session.execute(
                    select(CfeTariff.id, CfeTariff.tariff_code).where(CfeTariff.id == tariff_id).limit(1)
                )
                row = result.first()
        except SQLAlchemyError as exc:
            logger.exception("Error looking up CFE tariff %s", tariff_id)
            msg = f"Error looking up CFE tariff {tariff_id}"
            raise TariffLookupError(msg) from exc

        if row is None:
            logger.info("CFE tariff %s does not exist", tariff_id)
            return None
        return TariffDescriptor(tariff_type_id=row.id, tariff_type=row.tariff_code)
