"""Pydantic schemas for the prospect quote record and the operation payloads.

QuoteRecord = the canonical, normalized quote data handed to the renderer.
It is built once per request by the normalizer, enriched with the tariff
name, then treated as read-only (all models are frozen).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# Prospect id value meaning "no CRM prospect record yet"
NO_PROSPECT_SENTINEL = "0"

CANONICAL_SCHEMA_VERSION = 3


# ── Quote record sections ─────────────────────────────────────────────


class SystemProposed(BaseModel):
    """Physical sizing of the proposed solar system."""

    model_config = ConfigDict(frozen=True)

    system_power_w: float = 0
    system_energy_KWh: float = 0  # noqa: N815
    required_area_m2: float = 0


class SourceConsumption(BaseModel):
    """The prospect's historical usage."""

    model_config = ConfigDict(frozen=True)

    period: str = "bimonthly"
    consumption_KWh: float = 0  # noqa: N815


class CfeInfo(BaseModel):
    """Incumbent utility (CFE) billing description."""

    model_config = ConfigDict(frozen=True)

    tariff_type_id: int = 0
    tariff_type: str = ""  # filled in by tariff enrichment
    price_KWh: float = 0  # noqa: N815
    actual_bimonthly_payment: float = 0


class TerraenergyInfo(BaseModel):
    """Proposed provider billing."""

    model_config = ConfigDict(frozen=True)

    price_KWh: float = 0  # noqa: N815
    bimonthly_payment: float = 0
    monthly_payment: float = 0


class Savings(BaseModel):
    """Savings figures, computed upstream and passed in pre-computed."""

    model_config = ConfigDict(frozen=True)

    percentage: float = 0
    period: str = "bimonthly"
    year_period: str = "annual"
    period_saving: float = 0
    year_period_saving: float = 0
    eight_years_saving: float = 0


class QuoteRecord(BaseModel):
    """One generated quotation for one prospect."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    last_name: str = ""
    prospect_id: str = ""
    terralink_id: str = ""
    system_proposed: SystemProposed = SystemProposed()
    source_consumption: SourceConsumption = SourceConsumption()
    cfe_info: CfeInfo = CfeInfo()
    terraenergy_info: TerraenergyInfo = TerraenergyInfo()
    savings: Savings = Savings()

    @property
    def full_name(self) -> str:
        """Name and last name joined by a single space."""
        return " ".join(part for part in (self.name, self.last_name) if part)

    @property
    def files_under_terralink(self) -> bool:
        """True when the prospect id is the "no CRM record yet" sentinel."""
        return self.prospect_id == NO_PROSPECT_SENTINEL

    @property
    def storage_owner_id(self) -> str:
        """Identifier the generated document is filed under."""
        return self.terralink_id if self.files_under_terralink else self.prospect_id

    def to_payload(self) -> dict[str, Any]:
        """Return the record in its canonical, version-tagged input shape."""
        payload = self.model_dump()
        payload["schema_version"] = CANONICAL_SCHEMA_VERSION
        return payload


# ── Collaborator contracts ────────────────────────────────────────────


class TariffDescriptor(BaseModel):
    """Canonical tariff returned by the tariff catalog lookup.

    Only the fields the lookup actually sets are merged into the record.
    """

    tariff_type_id: int | None = None
    tariff_type: str | None = None


class StoredDocument(BaseModel):
    """Reference to an uploaded document."""

    bucket: str
    key: str
    url: str


# ── Operation payloads ────────────────────────────────────────────────


class QuotePdfResponse(BaseModel):
    """Success payload for the create-quote-PDF operation."""

    message: str
    data: StoredDocument


class ErrorResponse(BaseModel):
    """Failure payload returned by the HTTP layer."""

    message: str
    error: str | None = None
