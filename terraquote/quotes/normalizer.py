"""Quote normalizer: builds the canonical QuoteRecord from a raw payload.

Three request shapes have been sent by clients over time. Each has one
adapter that maps it onto the canonical flat layout; the record is then
built from that layout with every leaf passed through the coercion helpers.

    v1  LEGACY_FINANCIALS  system_proposed top-level, quote_details.financials
                           {savings, new_billing}, bill amounts in MXN
    v2  QUOTE_DETAILS      identity top-level, every section under quote_details
    v3  CANONICAL          flat record layout (what QuoteRecord.to_payload emits)

Normalization never raises and does not check business completeness;
see `terraquote.quotes.validation` for that.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import IntEnum
from typing import Any

from terraquote.quotes.coercion import get_path, to_number, to_text
from terraquote.schemas.quote import (
    CfeInfo,
    QuoteRecord,
    Savings,
    SourceConsumption,
    SystemProposed,
    TerraenergyInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = "bimonthly"
DEFAULT_YEAR_PERIOD = "annual"


class SchemaVersion(IntEnum):
    """Known request payload shapes."""

    LEGACY_FINANCIALS = 1
    QUOTE_DETAILS = 2
    CANONICAL = 3


def detect_schema_version(raw: Mapping[str, Any]) -> SchemaVersion:
    """Return the payload's schema version.

    An explicit integer `schema_version` tag wins; otherwise the shape is
    inferred from where `quote_details` and `financials` sit.
    """
    tag = raw.get("schema_version")
    if isinstance(tag, int) and not isinstance(tag, bool):
        try:
            return SchemaVersion(tag)
        except ValueError:
            logger.warning("Unknown schema_version %s, inferring from shape", tag)

    details = raw.get("quote_details")
    if isinstance(details, Mapping):
        if isinstance(details.get("financials"), Mapping):
            return SchemaVersion.LEGACY_FINANCIALS
        return SchemaVersion.QUOTE_DETAILS
    return SchemaVersion.CANONICAL


def normalize(raw: Any) -> QuoteRecord:
    """Build a fully-populated QuoteRecord from an arbitrary payload."""
    if not isinstance(raw, Mapping):
        logger.warning("Quote payload is not an object (%s), using empty payload", type(raw).__name__)
        raw = {}

    version = detect_schema_version(raw)
    canonical = _ADAPTERS[version](raw)
    logger.debug("Normalizing quote payload (schema v%d)", version)
    return _build_record(canonical)


# ── Version adapters ──────────────────────────────────────────────────


def _identity(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": raw.get("name"),
        "last_name": raw.get("last_name"),
        "prospect_id": raw.get("prospect_id"),
        "terralink_id": raw.get("terralink_id"),
    }


def _adapt_legacy_financials(raw: Mapping[str, Any]) -> dict[str, Any]:
    """v1: bill amounts in MXN, savings and new billing under financials."""
    details = raw.get("quote_details")
    financials = get_path(details, "financials")
    savings = get_path(financials, "savings")
    new_billing = get_path(financials, "new_billing")
    return {
        **_identity(raw),
        "system_proposed": {
            "system_power_w": get_path(raw, "system_proposed", "system_power_w"),
            "required_area_m2": get_path(raw, "system_proposed", "required_area_m2"),
        },
        "source_consumption": {"period": DEFAULT_PERIOD},
        "cfe_info": {
            "tariff_type_id": get_path(details, "cfe_info", "tariff_type_id"),
            "tariff_type": get_path(details, "cfe_info", "tariff_type"),
            "actual_bimonthly_payment": get_path(
                details, "source_consumption", "average_bimonthly_bill_mxn"
            ),
        },
        "terraenergy_info": {
            "bimonthly_payment": get_path(new_billing, "total_bimonthly_payment_mxn"),
            "monthly_payment": get_path(new_billing, "monthly_lease_mxn"),
        },
        "savings": {
            "percentage": get_path(savings, "percentage"),
            "period": DEFAULT_PERIOD,
            "year_period": DEFAULT_YEAR_PERIOD,
            "period_saving": get_path(savings, "bimonthly_mxn"),
            "year_period_saving": get_path(savings, "annual_mxn"),
        },
    }


def _adapt_quote_details(raw: Mapping[str, Any]) -> dict[str, Any]:
    """v2: identity top-level, every other section nested under quote_details."""
    details = raw.get("quote_details")
    return {
        **_identity(raw),
        "system_proposed": get_path(details, "system_proposed"),
        "source_consumption": get_path(details, "source_consumption"),
        "cfe_info": get_path(details, "cfe_info"),
        "terraenergy_info": get_path(details, "terraenergy_info"),
        "savings": get_path(details, "savings"),
    }


def _adapt_canonical(raw: Mapping[str, Any]) -> dict[str, Any]:
    return dict(raw)


_ADAPTERS: dict[SchemaVersion, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    SchemaVersion.LEGACY_FINANCIALS: _adapt_legacy_financials,
    SchemaVersion.QUOTE_DETAILS: _adapt_quote_details,
    SchemaVersion.CANONICAL: _adapt_canonical,
}


# ── Record construction ───────────────────────────────────────────────


def _build_record(data: Mapping[str, Any]) -> QuoteRecord:
    def num(*path: str) -> float:
        return to_number(get_path(data, *path))

    def text(*path: str, default: str = "") -> str:
        return to_text(get_path(data, *path), default)

    return QuoteRecord(
        name=text("name"),
        last_name=text("last_name"),
        prospect_id=text("prospect_id"),
        terralink_id=text("terralink_id"),
        system_proposed=SystemProposed(
            system_power_w=num("system_proposed", "system_power_w"),
            system_energy_KWh=num("system_proposed", "system_energy_KWh"),
            required_area_m2=num("system_proposed", "required_area_m2"),
        ),
        source_consumption=SourceConsumption(
            period=text("source_consumption", "period", default=DEFAULT_PERIOD),
            consumption_KWh=num("source_consumption", "consumption_KWh"),
        ),
        cfe_info=CfeInfo(
            tariff_type_id=int(num("cfe_info", "tariff_type_id")),
            tariff_type=text("cfe_info", "tariff_type"),
            price_KWh=num("cfe_info", "price_KWh"),
            actual_bimonthly_payment=num("cfe_info", "actual_bimonthly_payment"),
        ),
        terraenergy_info=TerraenergyInfo(
            price_KWh=num("terraenergy_info", "price_KWh"),
            bimonthly_payment=num("terraenergy_info", "bimonthly_payment"),
            monthly_payment=num("terraenergy_info", "monthly_payment"),
        ),
        savings=Savings(
            percentage=num("savings", "percentage"),
            period=text("savings", "period", default=DEFAULT_PERIOD),
            year_period=text("savings", "year_period", default=DEFAULT_YEAR_PERIOD),
            period_saving=num("savings", "period_saving"),
            year_period_saving=num("savings", "year_period_saving"),
            eight_years_saving=num("savings", "eight_years_saving"),
        ),
    )
