from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import pytest
import responses

from arqueo_client_sdk import ClientConfig, HttpClient, PendingMovement, SessionNotOpenError, TraceContext
from arqueo_client_sdk.clients.movements_client import MovementsClient

BASE = "https://api.example.com"


def _movements() -> MovementsClient:
    cfg = ClientConfig(env_name="test", api_base_url=BASE, retries=0, retry_backoff_seconds=0)
    return MovementsClient(http=HttpClient(cfg, trace=TraceContext()), access_token="token")


def _pending(**overrides) -> PendingMovement:
    data = {
        "movement_type": "Egreso",
        "amount": Decimal("150"),
        "shift": "M",
        "concept_id": 2,
        "details": "",
        "created_by": 7,
        "arco_id": 9,
        "fecha": date(2026, 3, 2),
    }
    data.update(overrides)
    return PendingMovement.model_validate(data)


@responses.activate
def test_submit_batch_sends_all_movements_in_one_body() -> None:
    responses.add(responses.POST, f"{BASE}/api/movements/batch", json={"message": "ok"})
    _movements().submit_batch([_pending(), _pending(movement_type="Ingreso", amount=Decimal("20.5"))])
    assert len(responses.calls) == 1
    body = json.loads(responses.calls[0].request.body)
    assert len(body["movements"]) == 2
    first = body["movements"][0]
    assert first["movement_type"] == "Egreso"
    assert first["amount"] == 150.0
    assert first["shift"] == "M"
    assert first["concept_id"] == 2
    assert first["created_by"] == 7
    assert first["arco_id"] == 9
    assert first["fecha"] == "2026-03-02"
    assert body["movements"][1]["amount"] == 20.5


@responses.activate
def test_submit_batch_on_closed_session() -> None:
    responses.add(
        responses.POST,
        f"{BASE}/api/movements/batch",
        json={"error": "No hay un arco abierto para este turno. Por favor, abra un arco primero."},
        status=400,
    )
    with pytest.raises(SessionNotOpenError):
        _movements().submit_batch([_pending()])


@responses.activate
def test_list_for_arco() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/api/movimientos/arco/9",
        json={
            "movements": [
                {"movement_id": 1, "movement_type": "Egreso", "amount": "150", "details": "Taxi", "concept_id": 2},
                {"movement_id": 2, "movement_type": "Ingreso", "amount": "80"},
            ]
        },
    )
    listing = _movements().list_for_arco(9)
    assert [item.movement_id for item in listing.movements] == [1, 2]
    assert listing.movements[0].amount == Decimal("150")


@responses.activate
def test_delete_movement() -> None:
    responses.add(responses.DELETE, f"{BASE}/api/movimientos/5", json={"message": "Movimiento eliminado"})
    _movements().delete(5)
    assert responses.calls[0].request.method == "DELETE"
