from __future__ import annotations

from datetime import date
from decimal import Decimal

from arqueo_client_sdk import ArcoStatusResponse, MovementType, SessionNotOpenError, TransportError

from arqueo_app.services.movements_service import MovementsService
from arqueo_app.services.session_tracker import SessionTracker
from arqueo_app.ui.movements.movement_entry_view import (
    ADD_CLOSED_MESSAGE,
    EMPTY_BATCH_MESSAGE,
    SUBMIT_ACTION,
    SUBMIT_CLOSED_MESSAGE,
    MovementEntryView,
)
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE

TODAY = date(2026, 3, 2)


def _view(session, state) -> MovementEntryView:
    return MovementEntryView(
        tracker=SessionTracker(session, state),
        service=MovementsService(session),
        state=state,
        today=lambda: TODAY,
    )


def _expense() -> dict:
    return {"movement_type": "Egreso", "amount": "150", "concept_id": "2", "details": "Taxi"}


def test_add_stages_movement_for_open_session(session, state) -> None:
    view = _view(session, state)
    result = view.add(_expense())
    assert result["ok"] is True
    assert result["count"] == 1
    movement = state.staging.to_batch()[0]
    assert movement.movement_type is MovementType.EGRESO
    assert movement.amount == Decimal("150")
    assert movement.shift == "M"
    assert movement.concept_id == 2
    assert movement.created_by == 7
    assert movement.arco_id == 9
    assert movement.fecha == TODAY
    assert session.movements.batches == []


def test_invalid_input_never_reaches_server(session, state) -> None:
    view = _view(session, state)
    result = view.add({"movement_type": "Egreso", "amount": "0", "concept_id": ""})
    assert result["ok"] is False
    assert {issue.split(":")[0] for issue in result["issues"]} == {"amount", "concept_id"}
    assert session.arco.calls == []
    assert state.staging.is_empty


def test_add_refused_when_session_closed(session, state) -> None:
    session.arco.status = ArcoStatusResponse(arco_abierto=False)
    result = _view(session, state).add(_expense())
    assert result["ok"] is False
    assert result["error"] == ADD_CLOSED_MESSAGE
    assert state.staging.is_empty


def test_add_requires_authenticated_user(session, state) -> None:
    state.user = None
    assert _view(session, state).add(_expense())["ok"] is False


def test_submit_sends_batch_and_clears(session, state) -> None:
    view = _view(session, state)
    view.add(_expense())
    view.add({"movement_type": "Ingreso", "amount": "80", "concept_id": 3})
    result = view.submit()
    assert result["ok"] is True
    assert result["submitted"] == 2
    assert len(session.movements.batches) == 1
    assert [item.movement_type for item in session.movements.batches[0]] == [MovementType.EGRESO, MovementType.INGRESO]
    assert state.staging.is_empty
    assert session.arco.operations()[-1] == "balance"
    assert view.notifications.latest()["level"] == "success"


def test_empty_submit_makes_no_call(session, state) -> None:
    view = _view(session, state)
    result = view.submit()
    assert result == {"ok": False, "error": EMPTY_BATCH_MESSAGE}
    assert session.arco.calls == []
    assert session.movements.batches == []


def test_submit_refused_after_session_closed(session, state) -> None:
    view = _view(session, state)
    view.add(_expense())
    session.arco.status = ArcoStatusResponse(arco_abierto=False)
    result = view.submit()
    assert result["error"] == SUBMIT_CLOSED_MESSAGE
    assert session.movements.batches == []
    assert len(state.staging) == 1


def test_failed_submit_keeps_buffer(session, state) -> None:
    view = _view(session, state)
    view.add(_expense())
    session.movements.submit_error = SessionNotOpenError(
        code="SESSION_NOT_OPEN",
        message="No hay un arco abierto para este turno. Por favor, abra un arco primero.",
        details=None,
        trace_id="t-5",
        status_code=400,
    )
    result = view.submit()
    assert result["ok"] is False
    assert result["error"].startswith("No hay un arco abierto")
    assert len(state.staging) == 1
    assert not state.guard.is_busy(SUBMIT_ACTION)


def test_transport_failure_keeps_buffer_with_retry_hint(session, state) -> None:
    view = _view(session, state)
    view.add(_expense())
    session.movements.submit_error = TransportError(
        code="TRANSPORT_ERROR", message="timeout", details=None, trace_id=None, status_code=0
    )
    result = view.submit()
    assert result["retryable"] is True
    assert len(state.staging) == 1


def test_double_submit_is_refused(session, state) -> None:
    view = _view(session, state)
    view.add(_expense())
    state.guard.begin(SUBMIT_ACTION)
    assert view.submit() == {"ok": False, "error": BUSY_MESSAGE}
    assert session.movements.batches == []


def test_remove_pending_rows(session, state) -> None:
    view = _view(session, state)
    view.add(_expense())
    view.add({"movement_type": "Ingreso", "amount": "80", "concept_id": 3})
    assert view.remove(5)["ok"] is False
    key = state.staging.entries()[1].key
    assert view.remove_entry(key)["count"] == 1
    assert view.remove(0)["count"] == 0
    assert view.render()["can_submit"] is False
