"""Create prospect quote PDF: the service's single operation.

Steps:
1. Normalize the raw payload into a QuoteRecord (never fails)
2. Check completeness and build the storage key, before any I/O
3. Resolve the CFE tariff name from the catalog
4. Render the PDF
5. Upload it under the key and return the storage reference

Any failure aborts the whole operation; nothing partial is returned.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from terraquote.config import BrandingSettings
from terraquote.documents.renderer import render_quote_pdf
from terraquote.quotes.enrichment import enrich_tariff
from terraquote.quotes.normalizer import normalize
from terraquote.quotes.validation import check_completeness
from terraquote.schemas.quote import QuotePdfResponse
from terraquote.storage.documents import PDF_CONTENT_TYPE, build_quote_key

if TYPE_CHECKING:
    from terraquote.services import QuoteServices

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "PDF de cotización generado exitosamente."


async def create_prospect_quote_pdf(
    payload: Any,
    services: QuoteServices,
    branding: BrandingSettings,
    now_ms: int | None = None,
) -> QuotePdfResponse:
    """Generate, store and reference the quote PDF for one prospect.

    Raises:
        IncompleteInputError: identity or sizing data missing (no lookup made).
        InvalidIdentifierError: the filing id cannot form a storage key (no lookup made).
        TariffNotFoundError: the tariff id is not in the catalog.
    """
    record = normalize(payload)
    check_completeness(record)

    epoch_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    key = build_quote_key(record, epoch_ms)

    record = await enrich_tariff(record, services.tariff_lookup)

    pdf_bytes = render_quote_pdf(record, branding)

    stored = await services.storage.upload(key, pdf_bytes, PDF_CONTENT_TYPE)

    logger.info("Quote PDF stored for %s at %s", record.storage_owner_id, stored.key)
    return QuotePdfResponse(message=SUCCESS_MESSAGE, data=stored)
