from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

XLSX_FILENAME = "informe-movimientos.xlsx"
PDF_FILENAME = "informe-movimientos.pdf"
SHEET_TITLE = "Movimientos"
PDF_TITLE = "Informe de Movimientos"


@dataclass(frozen=True)
class RenderedTable:
    """The table exactly as shown: headers plus already formatted cell text."""

    columns: list[str]
    rows: list[list[str]]
    summary: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def render_xlsx(table: RenderedTable) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE
    worksheet.append(table.columns)
    for row in table.rows:
        worksheet.append(list(row))
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def _draw_lines(pdf: canvas.Canvas, lines: Iterable[str], *, start_y: int, line_height: int) -> int:
    y = start_y
    for line in lines:
        if y < 72:
            pdf.showPage()
            pdf.setFont("Helvetica", 10)
            y = 750
        pdf.drawString(72, y, line)
        y -= line_height
    return y


def render_pdf(table: RenderedTable, *, generated_on: date) -> bytes:
    output = io.BytesIO()
    pdf = canvas.Canvas(output, pagesize=letter)
    pdf.setTitle(PDF_TITLE)
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawString(72, 750, PDF_TITLE)
    pdf.setFont("Helvetica", 10)
    lines = [f"Generado: {generated_on.strftime('%d/%m/%Y')}", "", "Resumen Financiero:"]
    lines.extend(f"{label}: {value}" for label, value in table.summary)
    y = _draw_lines(pdf, lines, start_y=726, line_height=14)
    y -= 10
    y = _draw_lines(pdf, [" | ".join(table.columns)], start_y=y, line_height=14)
    _draw_lines(pdf, [" | ".join(row) for row in table.rows], start_y=y, line_height=14)
    pdf.showPage()
    pdf.save()
    return output.getvalue()


def write_export(payload: bytes, directory: str | Path, filename: str) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / filename
    target.write_bytes(payload)
    logger.info("report_exported", extra={"export_file": str(target), "size_bytes": len(payload)})
    return target


def rows_as_text(rows: Sequence[Sequence[object]]) -> list[list[str]]:
    return [["" if cell is None else str(cell) for cell in row] for row in rows]
