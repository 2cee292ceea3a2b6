from __future__ import annotations

import json

import pytest

from arqueo_client_sdk import ClientConfig
from arqueo_client_sdk.exceptions import AuthError

from arqueo_app import main as app_main
from arqueo_app.bootstrap import AppBootstrap
from arqueo_app.telemetry.logger import TelemetryLogger


def _config() -> ClientConfig:
    return ClientConfig(
        env_name="test", api_base_url="https://api.example.com", retries=0, retry_backoff_seconds=0, default_shift="T"
    )


def _bootstrap(session, tmp_path) -> AppBootstrap:
    telemetry = TelemetryLogger(app_name="arqueo_app", enabled=True, log_file=tmp_path / "telemetry.jsonl")
    return AppBootstrap(config=_config(), session=session, telemetry=telemetry)


def test_start_loads_profile_session_and_balance(session, tmp_path) -> None:
    bootstrap = _bootstrap(session, tmp_path)
    result = bootstrap.start()
    assert result.authenticated is True
    assert bootstrap.state.shift == "T"
    assert bootstrap.state.user.user_id == 7
    assert bootstrap.state.session.arco_id == 9
    assert bootstrap.state.status_message == "Arco abierto"
    assert session.arco.operations() == ["current", "balance"]
    assert session.established == ["token"]
    assert session.user.user_id == 7

    events = [json.loads(line) for line in (tmp_path / "telemetry.jsonl").read_text().splitlines()]
    assert [event["category"] for event in events] == ["auth", "navigation"]
    assert events[0]["success"] is True
    assert events[1]["context"] == {"shift": "T", "session_open": True}


def test_profile_failure_leaves_user_unauthenticated(session, tmp_path) -> None:
    session.me.error = AuthError(code="HTTP_401", message="Token inválido", details=None, trace_id="t-1", status_code=401)
    bootstrap = _bootstrap(session, tmp_path)
    result = bootstrap.start()
    assert result.authenticated is False
    assert result.error_message == "Token inválido"
    assert bootstrap.state.is_authenticated is False
    assert session.arco.calls == []
    assert session.established == []


def test_missing_token_requires_login(session, tmp_path) -> None:
    session.token = None
    result = _bootstrap(session, tmp_path).start()
    assert result.authenticated is False
    assert not (tmp_path / "telemetry.jsonl").exists()


def test_views_share_state(session, tmp_path) -> None:
    bootstrap = _bootstrap(session, tmp_path)
    views = bootstrap.views
    assert views.expenses.movement_type == "Egreso"
    assert views.movement_entry.state is views.reports.state is bootstrap.state
    assert views.roles.notifications is bootstrap.notifications


def test_logout_clears_session_and_buffer(session, tmp_path) -> None:
    bootstrap = _bootstrap(session, tmp_path)
    bootstrap.start()
    bootstrap.views.movement_entry.add({"movement_type": "Ingreso", "amount": "10", "concept_id": 1})
    result = bootstrap.logout()
    assert result.authenticated is False
    assert session.cleared is True
    assert bootstrap.state.staging.is_empty
    assert bootstrap.state.user is None


def test_run_prints_dashboard_line(session, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(app_main, "AppBootstrap", lambda: _bootstrap(session, tmp_path))
    assert app_main.run() == 0
    assert "arco abierto, saldo $ 22.000,00" in capsys.readouterr().out
