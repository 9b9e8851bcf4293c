"""Quote document rendering: ReportLab layout and value formatters."""

from terraquote.documents.formatters import format_currency, format_number, format_percentage, period_label
from terraquote.documents.renderer import render_quote_pdf

__all__ = [
    "render_quote_pdf",
    "format_currency",
    "format_number",
    "format_percentage",
    "period_label",
]
