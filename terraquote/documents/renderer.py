"""Quote PDF rendering on a reportlab canvas.

Three US-letter pages:
1. Cover: brand bar, logo, client name and project reference.
2. Proposed system: sizing and historical consumption.
3. Billing & savings: current CFE bill vs the Terra Energy bill.

Everything is drawn in memory; the caller decides where the bytes go.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from pathlib import Path

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from terraquote.config import BrandingSettings
from terraquote.documents.formatters import (
    format_currency,
    format_number,
    format_percentage,
    period_label,
    title_case_name,
)
from terraquote.schemas.quote import QuoteRecord

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = LETTER
MARGIN = 20 * mm
BAR_HEIGHT = 15 * mm


def render_quote_pdf(record: QuoteRecord, branding: BrandingSettings) -> bytes:
    """Render the quote document and return the PDF bytes."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=LETTER)
    pdf.setTitle(f"Cotización {branding.company_name} - {title_case_name(record.full_name)}")
    pdf.setAuthor(branding.company_name)

    _draw_cover_page(pdf, record, branding)
    pdf.showPage()
    _draw_system_page(pdf, record, branding)
    pdf.showPage()
    _draw_savings_page(pdf, record, branding)
    pdf.showPage()

    pdf.save()
    logger.debug("Rendered quote PDF for %s (%d bytes)", record.storage_owner_id, buffer.tell())
    return buffer.getvalue()


def project_reference(record: QuoteRecord) -> str:
    """Reference printed under the client name."""
    if record.files_under_terralink:
        return f"Proyecto {record.terralink_id}"
    return f"Prospecto #{record.prospect_id}"


# ── Page layouts ──────────────────────────────────────────────────────


def _draw_cover_page(pdf: canvas.Canvas, record: QuoteRecord, branding: BrandingSettings) -> None:
    _draw_brand_bar(pdf, branding)

    if not _draw_image(pdf, branding.logo_path, MARGIN, PAGE_HEIGHT - 35 * mm, 40 * mm, 10 * mm):
        pdf.setFont("Helvetica-Bold", 18)
        pdf.setFillColor(HexColor(branding.primary_color))
        pdf.drawString(MARGIN, PAGE_HEIGHT - 33 * mm, branding.company_name)

    # Rounded panel on the right half
    panel_x, panel_y = 80 * mm, PAGE_HEIGHT - 220 * mm
    panel_w, panel_h = 120 * mm, 180 * mm
    pdf.setFillColor(HexColor(branding.panel_color))
    pdf.roundRect(panel_x, panel_y, panel_w, panel_h, 5 * mm, stroke=0, fill=1)
    _draw_image(pdf, branding.cover_image_path, panel_x + 5 * mm, panel_y + 25 * mm, 110 * mm, 150 * mm)

    pdf.setFont("Helvetica", 10)
    pdf.setFillColor(HexColor(branding.light_text_color))
    pdf.drawRightString(panel_x + panel_w - 5 * mm, panel_y + 5 * mm, branding.website)

    pdf.setFont("Helvetica-Bold", 28)
    pdf.setFillColor(HexColor(branding.dark_text_color))
    pdf.drawString(MARGIN, PAGE_HEIGHT - 105 * mm, title_case_name(record.name))
    pdf.setFont("Helvetica", 20)
    pdf.drawString(MARGIN, PAGE_HEIGHT - 115 * mm, title_case_name(record.last_name))

    pdf.setFont("Helvetica", 14)
    pdf.setFillColor(HexColor(branding.light_text_color))
    pdf.drawString(MARGIN, PAGE_HEIGHT - 127 * mm, project_reference(record))


def _draw_system_page(pdf: canvas.Canvas, record: QuoteRecord, branding: BrandingSettings) -> None:
    _draw_brand_bar(pdf, branding)
    write = _section_writer(pdf, branding, "Sistema propuesto")

    system = record.system_proposed
    write("Potencia del sistema", f"{format_number(system.system_power_w)} W")
    write("Generación estimada", f"{format_number(system.system_energy_KWh)} kWh")
    write("Área requerida", f"{format_number(system.required_area_m2, 1)} m²")

    consumption = record.source_consumption
    write = _section_writer(pdf, branding, "Tu consumo actual", start_y=PAGE_HEIGHT - 120 * mm)
    write("Periodo", period_label(consumption.period))
    write("Consumo", f"{format_number(consumption.consumption_KWh)} kWh")


def _draw_savings_page(pdf: canvas.Canvas, record: QuoteRecord, branding: BrandingSettings) -> None:
    _draw_brand_bar(pdf, branding)

    cfe = record.cfe_info
    write = _section_writer(pdf, branding, "Recibo CFE actual")
    write("Tarifa", cfe.tariff_type or "-")
    write("Precio por kWh", format_currency(cfe.price_KWh))
    write("Pago bimestral", format_currency(cfe.actual_bimonthly_payment))

    terra = record.terraenergy_info
    write = _section_writer(
        pdf, branding, f"Con {branding.company_name}", start_y=PAGE_HEIGHT - 100 * mm
    )
    write("Precio por kWh", format_currency(terra.price_KWh))
    write("Pago bimestral", format_currency(terra.bimonthly_payment))
    write("Pago mensual", format_currency(terra.monthly_payment))

    savings = record.savings
    write = _section_writer(pdf, branding, "Tu ahorro", start_y=PAGE_HEIGHT - 165 * mm)
    write("Porcentaje de ahorro", format_percentage(savings.percentage))
    write(f"Ahorro {period_label(savings.period).lower()}", format_currency(savings.period_saving))
    write(f"Ahorro {period_label(savings.year_period).lower()}", format_currency(savings.year_period_saving))
    write("Ahorro en 8 años", format_currency(savings.eight_years_saving))

    pdf.setFont("Helvetica", 8)
    pdf.setFillColor(HexColor(branding.light_text_color))
    pdf.drawString(
        MARGIN,
        MARGIN,
        "Cifras estimadas con base en la información proporcionada. Sujeto a visita técnica.",
    )


# ── Drawing helpers ───────────────────────────────────────────────────


def _draw_brand_bar(pdf: canvas.Canvas, branding: BrandingSettings) -> None:
    pdf.setFillColor(HexColor(branding.primary_color))
    pdf.rect(0, PAGE_HEIGHT - BAR_HEIGHT, PAGE_WIDTH, BAR_HEIGHT, stroke=0, fill=1)


def _draw_image(pdf: canvas.Canvas, path: str, x: float, y: float, width: float, height: float) -> bool:
    """Draw an optional image asset; returns False when it is not configured or missing."""
    if not path:
        return False
    if not Path(path).is_file():
        logger.warning("Image asset not found: %s", path)
        return False
    pdf.drawImage(path, x, y, width=width, height=height, preserveAspectRatio=True, mask="auto")
    return True


def _section_writer(
    pdf: canvas.Canvas,
    branding: BrandingSettings,
    title: str,
    start_y: float | None = None,
    line_height: float = 9 * mm,
) -> Callable[[str, str], None]:
    """Draw a section title and return a helper that writes label/value rows below it."""
    y = PAGE_HEIGHT - 35 * mm if start_y is None else start_y

    pdf.setFont("Helvetica-Bold", 16)
    pdf.setFillColor(HexColor(branding.primary_color))
    pdf.drawString(MARGIN, y, title)
    y -= line_height + 2 * mm

    def write_row(label: str, value: str) -> None:
        nonlocal y
        pdf.setFont("Helvetica", 11)
        pdf.setFillColor(HexColor(branding.light_text_color))
        pdf.drawString(MARGIN, y, label)
        pdf.setFont("Helvetica-Bold", 12)
        pdf.setFillColor(HexColor(branding.dark_text_color))
        pdf.drawRightString(PAGE_WIDTH - MARGIN, y, value)
        y -= line_height

    return write_row
