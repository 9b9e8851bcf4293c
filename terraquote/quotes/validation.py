"""Completeness pre-condition run before any lookup, rendering or upload."""

from __future__ import annotations

from terraquote.quotes.errors import IncompleteInputError
from terraquote.schemas.quote import QuoteRecord

# Identity fields that must be non-empty strings
REQUIRED_IDENTITY_FIELDS: tuple[str, ...] = ("name", "last_name", "prospect_id", "terralink_id")

# Sizing fields that must be non-zero
REQUIRED_SIZING_FIELDS: tuple[str, ...] = ("system_power_w", "required_area_m2")


def check_completeness(record: QuoteRecord) -> None:
    """Raise IncompleteInputError if the record cannot be rendered.

    Identity gaps are reported before sizing gaps, matching the order in
    which the quote form collects them.
    """
    missing_identity = [f for f in REQUIRED_IDENTITY_FIELDS if not getattr(record, f).strip()]
    if missing_identity:
        msg = "Información de prospecto incompleta."
        raise IncompleteInputError(msg, missing_identity)

    missing_sizing = [
        f"system_proposed.{f}" for f in REQUIRED_SIZING_FIELDS if not getattr(record.system_proposed, f)
    ]
    if missing_sizing:
        msg = "Información del sistema propuesto faltante."
        raise IncompleteInputError(msg, missing_sizing)
