from __future__ import annotations

from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest
import responses
from pydantic import ValidationError as PydanticValidationError

from arqueo_client_sdk import ClientConfig, HttpClient, ReportFilter, TraceContext, TransportError
from arqueo_client_sdk.clients.reports_client import ReportsClient

BASE = "https://api.example.com"

ROWS = [
    {
        "Fecha": "2026-03-02",
        "Tipo": "Ingreso",
        "Monto": 500,
        "Turno": "M",
        "Concepto": 3,
        "Detalles": "Venta",
        "ArcoID": 9,
        "Balance": 350,
    }
]


def _reports() -> ReportsClient:
    cfg = ClientConfig(env_name="test", api_base_url=BASE, retries=0, retry_backoff_seconds=0)
    return ReportsClient(http=HttpClient(cfg, trace=TraceContext()), access_token="token")


def _params() -> dict[str, list[str]]:
    return parse_qs(urlparse(responses.calls[0].request.url).query)


@responses.activate
def test_query_sends_only_present_filters() -> None:
    responses.add(responses.GET, f"{BASE}/api/graficos", json=ROWS)
    rows = _reports().query({"fecha_Desde": "2026-03-01", "tipo": "Ingreso", "balance_negativo": True})
    assert _params() == {"fecha_Desde": ["2026-03-01"], "tipo": ["ingreso"], "balance_negativo": ["1"]}
    assert rows[0].monto == Decimal("500")
    assert rows[0].arco_id == 9
    assert rows[0].concepto == 3


@responses.activate
def test_query_without_filters_has_no_query_string() -> None:
    responses.add(responses.GET, f"{BASE}/api/graficos", json=[])
    assert _reports().query() == []
    assert urlparse(responses.calls[0].request.url).query == ""


def test_filter_ranges_are_checked() -> None:
    with pytest.raises(PydanticValidationError):
        ReportFilter.model_validate({"fecha_Desde": "2026-03-05", "fecha_hasta": "2026-03-01"})
    with pytest.raises(PydanticValidationError):
        ReportFilter.model_validate({"monto_Minimo": 10, "monto_Maximo": 5})
    with pytest.raises(PydanticValidationError):
        ReportFilter.model_validate({"tipo": "Retiro"})


def test_filter_params_use_backend_names() -> None:
    params = ReportFilter(shift="T", arco_id=4, min_amount=Decimal("100"), max_amount=Decimal("900")).to_params()
    assert params == {"turno": "T", "arco_id": "4", "monto_Minimo": "100", "monto_Maximo": "900"}


@responses.activate
def test_superseded_query_is_cancelled() -> None:
    responses.add(responses.GET, f"{BASE}/api/graficos", json=ROWS)
    client = _reports()
    stale = client.begin_query()
    client.begin_query()
    with pytest.raises(TransportError) as excinfo:
        client.query({}, context_version=stale)
    assert excinfo.value.code == "REQUEST_CANCELLED"
