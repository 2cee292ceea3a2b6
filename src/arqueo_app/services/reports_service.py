from __future__ import annotations

from typing import Any, Mapping

from arqueo_client_sdk import ApiSession, ReportFilter, ReportRow

from arqueo_app.services.errors import normalize_error


class ReportsService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def begin_query(self) -> int:
        return self.session.reports_client().begin_query()

    def query(self, filters: ReportFilter | Mapping[str, Any] | None, *, context_version: int | None = None) -> list[ReportRow]:
        try:
            request = filters if isinstance(filters, ReportFilter) else ReportFilter.model_validate(_clean(filters or {}))
            return self.session.reports_client().query(request, context_version=context_version)
        except Exception as exc:
            raise normalize_error(exc) from exc


def _clean(filters: Mapping[str, Any]) -> dict[str, Any]:
    """Drop blank form values so absent criteria are never sent."""
    cleaned: dict[str, Any] = {}
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[key] = value.strip() if isinstance(value, str) else value
    return cleaned
