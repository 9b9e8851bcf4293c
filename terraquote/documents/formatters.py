"""Display formatting for the quote document (Mexican Spanish locale)."""

from __future__ import annotations

from decimal import Decimal

# Spanish labels for the period values clients send
PERIOD_LABELS: dict[str, str] = {
    "monthly": "Mensual",
    "bimonthly": "Bimestral",
    "annual": "Anual",
    "yearly": "Anual",
}


def title_case_word(word: str) -> str:
    """Uppercase the first letter, lowercase the rest: "maRÍa" -> "María"."""
    if not word:
        return word
    return word[0].upper() + word[1:].lower()


def title_case_name(name: str) -> str:
    """Title-case every space-separated word, preserving spacing."""
    return " ".join(title_case_word(word) for word in name.split(" "))


def format_currency(value: Decimal | float | int | None) -> str:
    """Format as MXN currency: 1234.5 -> "$1,234.50"."""
    if value is None:
        return "-"
    d = Decimal(str(value))
    sign = "-" if d < 0 else ""
    return f"{sign}${abs(d):,.2f}"


def format_number(value: float | int | None, decimals: int = 0) -> str:
    """Format with thousands separators: 5000 -> "5,000"."""
    if value is None:
        return "-"
    return f"{value:,.{decimals}f}"


def format_percentage(value: float | int | None) -> str:
    """Format a value that is already a percentage: 20 -> "20%", 12.5 -> "12.5%"."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return f"{int(value)}%"
    return f"{value:.1f}%"


def period_label(period: str) -> str:
    """Spanish label for a period value; unknown values pass through."""
    return PERIOD_LABELS.get(period.strip().lower(), period)
