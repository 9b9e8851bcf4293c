"""Quote data pipeline: normalize, check completeness, enrich with the CFE tariff."""

from terraquote.quotes.coercion import to_number, to_text
from terraquote.quotes.enrichment import enrich_tariff
from terraquote.quotes.errors import IncompleteInputError, InvalidIdentifierError, QuoteError, TariffNotFoundError
from terraquote.quotes.normalizer import SchemaVersion, detect_schema_version, normalize
from terraquote.quotes.validation import check_completeness

__all__ = [
    "to_number",
    "to_text",
    "enrich_tariff",
    "IncompleteInputError",
    "InvalidIdentifierError",
    "QuoteError",
    "TariffNotFoundError",
    "SchemaVersion",
    "detect_schema_version",
    "normalize",
    "check_completeness",
]
