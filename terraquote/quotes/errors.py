"""Domain errors for quote generation.

Collaborator failures (SQL, S3, Secrets Manager, rendering) are not wrapped
here; they propagate unchanged to the HTTP layer.
"""

from __future__ import annotations


class QuoteError(Exception):
    """Base class for quote generation errors."""


class IncompleteInputError(QuoteError):
    """Required identity or sizing fields are missing after normalization."""

    def __init__(self, message: str, missing_fields: list[str]) -> None:
        super().__init__(message)
        self.missing_fields = missing_fields


class TariffNotFoundError(QuoteError):
    """The tariff catalog has no entry for the requested tariff id."""

    def __init__(self, tariff_type_id: int) -> None:
        super().__init__(f"La tarifa CFE con ID {tariff_type_id} no existe.")
        self.tariff_type_id = tariff_type_id


class InvalidIdentifierError(QuoteError):
    """An id used to file the document cannot be part of a storage key."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Identificador inválido en {field}: {value!r}.")
        self.field = field
        self.value = value
