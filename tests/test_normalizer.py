"""Tests for the quote normalizer.

Covers:
- Schema version detection (explicit tag and inferred shape)
- Each version adapter producing the canonical record
- Numeric coercion and string/label defaults on every leaf
- Idempotence through QuoteRecord.to_payload()
- Record views are projections, never calculations
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from terraquote.quotes.normalizer import SchemaVersion, detect_schema_version, normalize
from terraquote.schemas.quote import QuoteRecord

# ── Helpers ───────────────────────────────────────────────────────────


def _current_payload(**overrides) -> dict:
    """A complete payload in the current (quote_details) request shape."""
    payload = {
        "name": "ana maría",
        "last_name": "lopez",
        "prospect_id": "0",
        "terralink_id": "TL-9",
        "quote_details": {
            "system_proposed": {"system_power_w": 5000, "system_energy_KWh": 7200, "required_area_m2": 30},
            "source_consumption": {"period": "bimonthly", "consumption_KWh": 600},
            "cfe_info": {"tariff_type_id": 1, "price_KWh": "3.10", "actual_bimonthly_payment": "1860"},
            "terraenergy_info": {"price_KWh": 2.4, "bimonthly_payment": 1488, "monthly_payment": 744},
            "savings": {
                "percentage": 20,
                "period": "bimonthly",
                "year_period": "annual",
                "period_saving": 372,
                "year_period_saving": 2232,
                "eight_years_saving": 17856,
            },
        },
    }
    payload.update(overrides)
    return payload


def _legacy_payload() -> dict:
    """A payload in the original financials shape."""
    return {
        "name": "Juan",
        "last_name": "Pérez",
        "prospect_id": "1234",
        "terralink_id": "TL-1",
        "system_proposed": {
            "system_power_w": 4400,
            "panel_count": 8,
            "panel_power_w": 550,
            "required_area_m2": 22,
        },
        "quote_details": {
            "source_consumption": {"average_bimonthly_bill_mxn": 2500},
            "cfe_info": {"tariff_type_id": 8, "tariff_type": ""},
            "financials": {
                "savings": {"bimonthly_mxn": 800, "annual_mxn": 4800, "percentage": 32},
                "new_billing": {
                    "monthly_lease_mxn": 650,
                    "estimated_bimonthly_cfe_mxn": 400,
                    "total_bimonthly_payment_mxn": 1700,
                },
            },
        },
    }


# ── Version detection ─────────────────────────────────────────────────


class TestDetectSchemaVersion:
    def test_legacy_shape(self):
        assert detect_schema_version(_legacy_payload()) == SchemaVersion.LEGACY_FINANCIALS

    def test_quote_details_shape(self):
        assert detect_schema_version(_current_payload()) == SchemaVersion.QUOTE_DETAILS

    def test_flat_shape(self):
        assert detect_schema_version({"name": "x", "savings": {}}) == SchemaVersion.CANONICAL

    def test_explicit_tag_wins(self):
        payload = _current_payload(schema_version=3)
        assert detect_schema_version(payload) == SchemaVersion.CANONICAL

    def test_unknown_tag_falls_back_to_shape(self):
        assert detect_schema_version(_current_payload(schema_version=99)) == SchemaVersion.QUOTE_DETAILS


# ── Current shape ─────────────────────────────────────────────────────


class TestNormalizeQuoteDetails:
    def test_identity_passthrough(self):
        record = normalize(_current_payload())
        assert record.name == "ana maría"
        assert record.last_name == "lopez"
        assert record.prospect_id == "0"
        assert record.terralink_id == "TL-9"

    def test_numeric_strings_parsed(self):
        record = normalize(_current_payload())
        assert record.cfe_info.price_KWh == 3.10
        assert record.cfe_info.actual_bimonthly_payment == 1860

    def test_all_sections_populated(self):
        record = normalize(_current_payload())
        assert record.system_proposed.system_energy_KWh == 7200
        assert record.source_consumption.consumption_KWh == 600
        assert record.cfe_info.tariff_type_id == 1
        assert record.terraenergy_info.monthly_payment == 744
        assert record.savings.eight_years_saving == 17856

    def test_numeric_string_for_tariff_id(self):
        payload = _current_payload()
        payload["quote_details"]["cfe_info"]["tariff_type_id"] = "8"
        assert normalize(payload).cfe_info.tariff_type_id == 8

    @pytest.mark.parametrize("bad", [None, "abc", "", {"x": 1}, True])
    def test_bad_numeric_defaults_to_zero(self, bad):
        payload = _current_payload()
        payload["quote_details"]["system_proposed"]["system_power_w"] = bad
        assert normalize(payload).system_proposed.system_power_w == 0

    def test_label_passthrough_of_unknown_value(self):
        payload = _current_payload()
        payload["quote_details"]["source_consumption"]["period"] = "quarterly"
        assert normalize(payload).source_consumption.period == "quarterly"


# ── Legacy shape ──────────────────────────────────────────────────────


class TestNormalizeLegacyFinancials:
    def test_sizing_from_top_level(self):
        record = normalize(_legacy_payload())
        assert record.system_proposed.system_power_w == 4400
        assert record.system_proposed.required_area_m2 == 22
        assert record.system_proposed.system_energy_KWh == 0

    def test_bill_maps_to_actual_payment(self):
        record = normalize(_legacy_payload())
        assert record.cfe_info.tariff_type_id == 8
        assert record.cfe_info.actual_bimonthly_payment == 2500

    def test_new_billing_maps_to_terraenergy_info(self):
        record = normalize(_legacy_payload())
        assert record.terraenergy_info.bimonthly_payment == 1700
        assert record.terraenergy_info.monthly_payment == 650

    def test_savings_mapping(self):
        savings = normalize(_legacy_payload()).savings
        assert savings.percentage == 32
        assert savings.period_saving == 800
        assert savings.year_period_saving == 4800
        assert savings.period == "bimonthly"
        assert savings.year_period == "annual"


# ── Defaults & totality ───────────────────────────────────────────────


class TestNormalizeDefaults:
    def test_empty_object(self):
        record = normalize({})
        assert record == QuoteRecord()
        assert record.name == ""
        assert record.cfe_info.tariff_type == ""
        assert record.source_consumption.period == "bimonthly"
        assert record.savings.year_period == "annual"
        assert record.system_proposed.system_power_w == 0

    @pytest.mark.parametrize("raw", [None, [], "text", 42])
    def test_non_object_payload(self, raw):
        assert normalize(raw) == QuoteRecord()

    def test_null_sections(self):
        record = normalize({"name": None, "quote_details": {"cfe_info": None, "savings": None}})
        assert record.name == ""
        assert record.cfe_info.tariff_type_id == 0
        assert record.savings.percentage == 0

    def test_numeric_prospect_id_becomes_string(self):
        assert normalize({"prospect_id": 0}).prospect_id == "0"

    def test_integer_beyond_float_range(self):
        body = '{"quote_details": {"system_proposed": {"system_power_w": 1' + "0" * 400 + "}}}"
        record = normalize(json.loads(body))
        assert record.system_proposed.system_power_w == 0

    def test_python_only_number_syntax_is_not_parsed(self):
        record = normalize({"quote_details": {"cfe_info": {"actual_bimonthly_payment": "1_860"}}})
        assert record.cfe_info.actual_bimonthly_payment == 0


# ── Idempotence ───────────────────────────────────────────────────────


class TestIdempotence:
    def test_current_shape_round_trip(self):
        record = normalize(_current_payload())
        assert normalize(record.to_payload()) == record

    def test_legacy_shape_round_trip(self):
        record = normalize(_legacy_payload())
        assert normalize(record.to_payload()) == record

    def test_payload_is_version_tagged(self):
        assert normalize({}).to_payload()["schema_version"] == SchemaVersion.CANONICAL


# ── Record views ──────────────────────────────────────────────────────


class TestRecordViews:
    def test_full_name(self):
        assert normalize(_current_payload()).full_name == "ana maría lopez"

    def test_full_name_without_last_name(self):
        assert normalize({"name": "Ana"}).full_name == "Ana"

    def test_sentinel_files_under_terralink(self):
        record = normalize(_current_payload())
        assert record.files_under_terralink is True
        assert record.storage_owner_id == "TL-9"

    def test_real_prospect_files_under_prospect(self):
        record = normalize(_current_payload(prospect_id="1234"))
        assert record.files_under_terralink is False
        assert record.storage_owner_id == "1234"

    def test_monthly_payment_is_not_derived(self):
        """A missing monthly figure stays 0; it is never computed from the bimonthly one."""
        payload = _current_payload()
        del payload["quote_details"]["terraenergy_info"]["monthly_payment"]
        record = normalize(payload)
        assert record.terraenergy_info.bimonthly_payment == 1488
        assert record.terraenergy_info.monthly_payment == 0

    def test_percentage_kept_as_supplied(self):
        assert normalize(_current_payload()).savings.percentage == 20

    def test_record_is_frozen(self):
        record = normalize(_current_payload())
        with pytest.raises(ValidationError):
            record.name = "other"  # type: ignore[misc]
