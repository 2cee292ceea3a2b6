from __future__ import annotations

from decimal import Decimal

import pytest
import responses

from arqueo_client_sdk import ClientConfig, HttpClient, SessionNotOpenError, TraceContext
from arqueo_client_sdk.clients.arco_client import ArcoClient
from arqueo_client_sdk.exceptions import ValidationError

BASE = "https://api.example.com"


def _arco() -> ArcoClient:
    cfg = ClientConfig(env_name="test", api_base_url=BASE, retries=0, retry_backoff_seconds=0)
    return ArcoClient(http=HttpClient(cfg, trace=TraceContext()), access_token="token")


@responses.activate
def test_status_sends_shift_and_bearer() -> None:
    responses.add(responses.GET, f"{BASE}/arco/estado", json={"arco_abierto": True, "arco": {"id": 12}})
    status = _arco().get_status("T")
    assert status.is_open
    assert status.arco.id == 12
    request = responses.calls[0].request
    assert "turno=T" in request.url
    assert request.headers["Authorization"] == "Bearer token"


@responses.activate
def test_status_without_arco_is_closed() -> None:
    responses.add(responses.GET, f"{BASE}/arco/estado", json={"arco_abierto": True, "arco": None})
    assert _arco().get_status("M").is_open is False


@responses.activate
def test_open_posts_json_shift() -> None:
    responses.add(responses.POST, f"{BASE}/arco/abrir", json={"message": "ok"})
    _arco().open("M")
    assert responses.calls[0].request.body == b'{"turno": "M"}'


@responses.activate
def test_open_advanced_returns_id() -> None:
    responses.add(responses.POST, f"{BASE}/arco/abrir-avanzado", json={"id": 31})
    assert _arco().open_advanced("T").id == 31
    assert responses.calls[0].request.body == "turno=T"


@responses.activate
def test_close_with_withdrawal_is_one_request() -> None:
    responses.add(responses.POST, f"{BASE}/arco/cerrar", json={"message": "ok"})
    _arco().close(7, Decimal("1500.50"))
    assert len(responses.calls) == 1
    assert responses.calls[0].request.body == "arco_id=7&retiro_amount=1500.50"


@responses.activate
def test_close_without_withdrawal_omits_amount() -> None:
    responses.add(responses.POST, f"{BASE}/arco/cerrar", json={"message": "ok"})
    _arco().close(7, Decimal("0"))
    assert responses.calls[0].request.body == "arco_id=7"


@responses.activate
def test_close_on_closed_session_maps_error() -> None:
    responses.add(responses.POST, f"{BASE}/arco/cerrar", json={"error": "El arco ya está cerrado"}, status=400)
    with pytest.raises(SessionNotOpenError) as excinfo:
        _arco().close(7)
    assert excinfo.value.code == "SESSION_NOT_OPEN"
    assert excinfo.value.message == "El arco ya está cerrado"


@responses.activate
def test_other_business_errors_pass_through() -> None:
    responses.add(responses.POST, f"{BASE}/arco/abrir", json={"error": "Turno inválido"}, status=400)
    with pytest.raises(ValidationError) as excinfo:
        _arco().open("M")
    assert not isinstance(excinfo.value, SessionNotOpenError)


@responses.activate
def test_last_balance_reads_null_as_zero() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/api/saldo-ultimo-arco",
        json={"saldo_total": "1200.50", "total_ingresos": 2000, "total_egresos": None},
    )
    balance = _arco().get_last_balance()
    assert balance.saldo_total == Decimal("1200.5")
    assert balance.total_egresos == Decimal("0")
    assert balance.saldo_inicial == Decimal("0")
