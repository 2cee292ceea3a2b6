from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models_reports import ReportFilter, ReportRow
from .base import BaseClient, _coerce_model, _expect_list

REPORT_CONTEXT = "reports.graficos"


@dataclass
class ReportsClient(BaseClient):
    module: str = "reports"

    def query(
        self,
        filters: ReportFilter | Mapping[str, Any] | None = None,
        *,
        context_version: int | None = None,
    ) -> list[ReportRow]:
        """Fetch report rows.

        When ``context_version`` is given the response is discarded with a
        ``REQUEST_CANCELLED`` transport error if a newer query started first.
        """
        request = _coerce_model(filters or {}, ReportFilter)
        data = self._request(
            "GET",
            "/api/graficos",
            params=request.to_params() or None,
            operation="query",
            context_key=REPORT_CONTEXT if context_version is not None else None,
            context_version=context_version,
        )
        return [ReportRow.model_validate(item) for item in _expect_list(data, "report")]

    def begin_query(self) -> int:
        return self.http.switch_context(REPORT_CONTEXT)
