"""Tariff enrichment: resolves the CFE tariff name from the tariff catalog."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from terraquote.quotes.coercion import to_text
from terraquote.quotes.errors import TariffNotFoundError
from terraquote.schemas.quote import QuoteRecord, TariffDescriptor

logger = logging.getLogger(__name__)

TariffLookup = Callable[[int], Awaitable[TariffDescriptor | None]]


async def enrich_tariff(record: QuoteRecord, lookup: TariffLookup) -> QuoteRecord:
    """Return a copy of `record` with the catalog's tariff fields merged in.

    Only the fields the descriptor actually sets are overwritten; the
    tariff id the lookup was keyed on is kept as-is. Lookup errors are not
    caught here.

    Raises:
        TariffNotFoundError: the catalog has no tariff with that id.
    """
    tariff_id = record.cfe_info.tariff_type_id
    descriptor = await lookup(tariff_id)
    if descriptor is None:
        logger.warning("CFE tariff %s not found", tariff_id)
        raise TariffNotFoundError(tariff_id)

    supplied = descriptor.model_dump(exclude_unset=True, exclude={"tariff_type_id"})
    updates = {key: to_text(value) for key, value in supplied.items() if value is not None}
    logger.info("Resolved CFE tariff %s -> %s", tariff_id, updates.get("tariff_type", "-"))

    cfe_info = record.cfe_info.model_copy(update=updates)
    return record.model_copy(update={"cfe_info": cfe_info})
