from __future__ import annotations

from decimal import Decimal

from arqueo_client_sdk import ArcoStatusResponse, SessionNotOpenError

from arqueo_app.services.session_tracker import SessionTracker
from arqueo_app.ui.cash.session_panel_view import CLOSE_ACTION, ClosePhase, SessionPanelView
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE


def _panel(session, state) -> SessionPanelView:
    panel = SessionPanelView(tracker=SessionTracker(session, state), state=state)
    panel.load()
    return panel


def test_load_renders_open_session(session, state) -> None:
    rendered = _panel(session, state).render()
    assert rendered["is_open"] is True
    assert rendered["arco_id"] == 9
    assert rendered["title"] == "Arqueo abierto"
    assert rendered["balance"] == "$ 22.000,00"
    assert rendered["phase"] == "idle"


def test_toggle_on_closed_session_opens_new_one(session, state) -> None:
    session.arco.status = ArcoStatusResponse(arco_abierto=False)
    panel = _panel(session, state)
    result = panel.toggle()
    assert result["ok"] is True
    assert result["arco_id"] == 40
    assert result["panel"]["balance"] == "$ 0,00"
    assert panel.notifications.latest()["level"] == "success"


def test_full_close_flow_with_withdrawal(session, state) -> None:
    panel = _panel(session, state)
    started = panel.toggle()
    assert started["phase"] == "counting"
    assert panel.counter.expected == Decimal("22000")

    panel.set_count(20000, 1)
    panel.increment(1000)
    panel.increment(1000)
    step = panel.set_rest("50")
    assert step["reconciliation"]["variance_class"] == "positive"
    assert step["reconciliation"]["counted_total"] == "$ 22.050,00"

    assert panel.confirm_count()["phase"] == "withdrawal"
    result = panel.confirm_withdrawal("500")
    assert result["ok"] is True
    assert ("close", (9, Decimal("500"))) in session.arco.calls
    assert panel.phase is ClosePhase.IDLE
    assert state.session.is_open is False
    assert result["panel"]["title"] == "Arqueo cerrado"


def test_zero_withdrawal_closes_without_amount(session, state) -> None:
    panel = _panel(session, state)
    panel.toggle()
    panel.confirm_count()
    assert panel.confirm_withdrawal(0)["ok"] is True
    assert ("close", (9, None)) in session.arco.calls


def test_negative_withdrawal_is_rejected_locally(session, state) -> None:
    panel = _panel(session, state)
    panel.toggle()
    panel.confirm_count()
    result = panel.confirm_withdrawal("-5")
    assert result["ok"] is False
    assert "close" not in session.arco.operations()
    assert panel.phase is ClosePhase.WITHDRAWAL


def test_close_failure_shows_server_text(session, state) -> None:
    session.arco.errors["close"] = SessionNotOpenError(
        code="SESSION_NOT_OPEN", message="El arco ya está cerrado", details=None, trace_id="t-2", status_code=400
    )
    panel = _panel(session, state)
    panel.toggle()
    panel.confirm_count()
    result = panel.confirm_withdrawal()
    assert result["ok"] is False
    assert result["error"] == "El arco ya está cerrado"
    assert result["trace_id"] == "t-2"
    assert panel.render()["error"] == "El arco ya está cerrado"
    assert not state.guard.is_busy(CLOSE_ACTION)


def test_count_steps_need_counting_phase(session, state) -> None:
    panel = _panel(session, state)
    assert panel.set_count(20000, 1)["ok"] is False
    assert panel.confirm_count()["ok"] is False
    assert panel.confirm_withdrawal()["ok"] is False


def test_unknown_arco_id_cancels_close(session, state) -> None:
    panel = _panel(session, state)
    panel.toggle()
    state.session.arco_id = None
    assert panel.confirm_count()["ok"] is False
    assert panel.phase is ClosePhase.IDLE


def test_busy_close_is_refused(session, state) -> None:
    panel = _panel(session, state)
    panel.toggle()
    panel.confirm_count()
    state.guard.begin(CLOSE_ACTION)
    assert panel.confirm_withdrawal() == {"ok": False, "error": BUSY_MESSAGE}
    assert "close" not in session.arco.operations()


def test_change_shift(session, state) -> None:
    panel = _panel(session, state)
    assert panel.change_shift("x")["ok"] is False
    result = panel.change_shift("t")
    assert result["ok"] is True
    assert state.shift == "T"
    assert session.arco.calls[-1] == ("status", "T")
