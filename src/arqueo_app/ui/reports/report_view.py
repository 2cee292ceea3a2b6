from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Mapping

from arqueo_client_sdk import ReportFilter, ReportRow

from arqueo_app.export.table_exporter import (
    PDF_FILENAME,
    XLSX_FILENAME,
    RenderedTable,
    render_pdf,
    render_xlsx,
    rows_as_text,
    write_export,
)
from arqueo_app.formatting import format_currency
from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.services.reports_service import ReportsService
from arqueo_app.state import AppState
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE
from arqueo_app.ui.shared.error_presenter import ErrorPresenter
from arqueo_app.ui.shared.notification_center import NotificationCenter
from arqueo_app.ui.shared.state_widgets import StateWidget
from arqueo_app.ui.shared.view_state import resolve_state

logger = logging.getLogger(__name__)

EXPORT_ACTION = "reports.export"
COLUMNS = ["Fecha", "Tipo", "Monto", "Turno", "Concepto", "Detalles", "ArcoID", "Balance"]
GROUP_KEYS = ("Mes", "Concepto", "Turno")


def _matches_search(row: ReportRow, term: str) -> bool:
    haystack = (
        row.fecha,
        row.tipo,
        row.turno or "",
        "" if row.concepto is None else str(row.concepto),
        row.detalles or "",
        str(row.monto),
        "" if row.arco_id is None else str(row.arco_id),
    )
    return any(term in value.lower() for value in haystack)


def summarize(rows: list[ReportRow]) -> dict[str, Any]:
    income = sum((row.monto for row in rows if row.tipo == "Ingreso"), Decimal("0"))
    expense = sum((row.monto for row in rows if row.tipo == "Egreso"), Decimal("0"))
    negative_arcos = {row.arco_id for row in rows if row.balance is not None and row.balance < 0}
    return {
        "income": income,
        "expense": expense,
        "balance": income - expense,
        "count": len(rows),
        "negative_balance_count": len(negative_arcos),
    }


def group_totals(rows: list[ReportRow], by: str) -> dict[str, Any]:
    """Sum ``Monto`` per month, concept or shift, as chart-ready labels and values."""
    if by not in GROUP_KEYS:
        raise ValueError(f"Agrupar por debe ser uno de: {', '.join(GROUP_KEYS)}")
    grouped: OrderedDict[str, Decimal] = OrderedDict()
    for row in rows:
        if by == "Mes":
            key = row.fecha[:7]
        elif by == "Concepto":
            key = "" if row.concepto is None else str(row.concepto)
        else:
            key = row.turno or ""
        grouped[key] = grouped.get(key, Decimal("0")) + row.monto
    return {"labels": list(grouped.keys()), "values": list(grouped.values())}


@dataclass
class ReportView:
    """Filtered movement report: backend query, quick filter, summary and exports."""

    service: ReportsService
    state: AppState
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    presenter: ErrorPresenter = field(default_factory=ErrorPresenter)
    today: Callable[[], date] = date.today
    dataset: list[ReportRow] = field(default_factory=list)
    visible: list[ReportRow] = field(default_factory=list)
    search_text: str = ""
    type_filter: str | None = None
    filters: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None
    error_kind: str | None = None
    is_loading: bool = False
    is_exporting: bool = False
    table: RenderedTable = field(default_factory=lambda: RenderedTable(columns=list(COLUMNS), rows=[]))
    _latest_query: int = 0

    def query(self, filters: ReportFilter | Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run a backend query; a response superseded by a newer query is dropped."""
        version = self.service.begin_query()
        self._latest_query = version
        self.is_loading = True
        try:
            rows = self.service.query(filters, context_version=version)
        except ArqueoServiceError as exc:
            if exc.kind == "cancelled" or version != self._latest_query:
                logger.info("report_query_superseded", extra={"query_version": version})
                return {"ok": False, "stale": True}
            self.is_loading = False
            self.dataset = []
            self.error_message = self.presenter.present(exc, action="reports.query").user_message
            self.error_kind = exc.kind
            self._refresh()
            return {"ok": False, "error": self.error_message, "state": self.render()["state"]}
        if version != self._latest_query:
            logger.info("report_query_superseded", extra={"query_version": version})
            return {"ok": False, "stale": True}
        self.is_loading = False
        self.filters = dict(filters.model_dump(exclude_none=True)) if isinstance(filters, ReportFilter) else dict(filters or {})
        self.dataset = rows
        self.error_message = None
        self.error_kind = None
        self._refresh()
        return {"ok": True, "count": len(self.visible), "total": len(self.dataset)}

    def set_quick_filter(self, *, search: str | None = None, movement_type: str | None = None) -> dict[str, Any]:
        """Update the client-side filter; ``None`` keeps a criterion, ``""`` clears it."""
        if search is not None:
            self.search_text = search
        if movement_type is not None:
            self.type_filter = movement_type or None
        self._refresh()
        return {"ok": True, "count": len(self.visible), "total": len(self.dataset)}

    def apply_quick_filter(self) -> list[ReportRow]:
        term = self.search_text.strip().lower()
        wanted_type = self.type_filter.strip().lower() if self.type_filter else None
        self.visible = [
            row
            for row in self.dataset
            if (not term or _matches_search(row, term)) and (wanted_type is None or row.tipo.lower() == wanted_type)
        ]
        return self.visible

    def summary(self) -> dict[str, Any]:
        return summarize(self.visible)

    def group(self, by: str) -> dict[str, Any]:
        if not self.visible:
            return {"ok": False, "error": "No hay datos para graficar"}
        try:
            chart = group_totals(self.visible, by)
        except ValueError as exc:
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "group_by": by, **chart}

    def export_xlsx(self, directory: str | Path) -> dict[str, Any]:
        return self._export(directory, XLSX_FILENAME, render_xlsx, "Excel")

    def export_pdf(self, directory: str | Path) -> dict[str, Any]:
        return self._export(directory, PDF_FILENAME, lambda table: render_pdf(table, generated_on=self.today()), "PDF")

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(self.visible),
            error_kind=self.error_kind,
            empty_message="No se encontraron movimientos para los filtros aplicados",
        )
        return {
            "state": StateWidget(state, retry_action="query").render(),
            "columns": list(self.table.columns),
            "rows": [list(row) for row in self.table.rows],
            "summary": dict(self.table.summary),
            "result_count": f"Mostrando {len(self.visible)} de {len(self.dataset)} movimientos",
            "filters": {key: str(value) for key, value in self.filters.items()},
            "search": self.search_text,
            "type_filter": self.type_filter,
            "exporting": self.is_exporting,
        }

    def _refresh(self) -> None:
        self.apply_quick_filter()
        self.table = self._render_table()

    def _render_table(self) -> RenderedTable:
        raw_rows = [
            [
                row.fecha,
                row.tipo,
                format_currency(row.monto),
                row.turno,
                row.concepto,
                row.detalles,
                row.arco_id,
                format_currency(row.balance) if row.balance is not None else "",
            ]
            for row in self.visible
        ]
        totals = summarize(self.visible)
        summary = [
            ("Ingresos", format_currency(totals["income"])),
            ("Egresos", format_currency(totals["expense"])),
            ("Saldo", format_currency(totals["balance"])),
            ("Movimientos", str(totals["count"])),
        ]
        if totals["negative_balance_count"]:
            summary.append(("Arcos con balance negativo", str(totals["negative_balance_count"])))
        return RenderedTable(columns=list(COLUMNS), rows=rows_as_text(raw_rows), summary=summary)

    def _export(
        self,
        directory: str | Path,
        filename: str,
        renderer: Callable[[RenderedTable], bytes],
        label: str,
    ) -> dict[str, Any]:
        if self.table.is_empty:
            self.notifications.push(level="warning", title="Exportar", message="No hay datos para exportar")
            return {"ok": False, "error": "No hay datos para exportar"}
        guard = self.state.guard
        if not guard.begin(EXPORT_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        self.is_exporting = True
        try:
            path = write_export(renderer(self.table), directory, filename)
        except OSError as exc:
            logger.warning("report_export_failed", extra={"export_format": label, "error_type": type(exc).__name__})
            self.notifications.error("Exportar", f"Error al exportar {label}")
            return {"ok": False, "error": f"Error al exportar {label}"}
        finally:
            self.is_exporting = False
            guard.end(EXPORT_ACTION)
        self.notifications.success("Exportar", f"{label} exportado correctamente")
        return {"ok": True, "path": str(path)}
