from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Mapping

from arqueo_client_sdk import validate_pending_movement

from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.services.movements_service import MovementsService
from arqueo_app.services.session_tracker import SessionTracker
from arqueo_app.state import AppState
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE
from arqueo_app.ui.shared.error_presenter import ErrorPresenter
from arqueo_app.ui.shared.notification_center import NotificationCenter

logger = logging.getLogger(__name__)

ADD_ACTION = "movements.add"
SUBMIT_ACTION = "movements.submit"

ADD_CLOSED_MESSAGE = "Debe abrir el arco para agregar movimientos."
SUBMIT_CLOSED_MESSAGE = "No se puede enviar: el arco está cerrado o no existe."
EMPTY_BATCH_MESSAGE = "No hay movimientos pendientes para enviar."


@dataclass
class MovementEntryView:
    """Income/expense entry screen backed by the pending-movement buffer."""

    tracker: SessionTracker
    service: MovementsService
    state: AppState
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    presenter: ErrorPresenter = field(default_factory=ErrorPresenter)
    today: Callable[[], date] = date.today
    last_issues: list[str] = field(default_factory=list)

    def add(self, form: Mapping[str, Any]) -> dict[str, Any]:
        if not self.state.is_authenticated:
            return {"ok": False, "error": "Usuario no autenticado correctamente"}
        payload = dict(form)
        payload.setdefault("shift", self.state.shift)
        if payload.get("created_by") in (None, ""):
            payload["created_by"] = self.state.user.user_id if self.state.user else None

        check = validate_pending_movement(payload)
        if not check.ok:
            self.last_issues = [f"{issue.field}: {issue.reason}" for issue in check.issues]
            return {"ok": False, "error": "Por favor completa todos los campos correctamente", "issues": self.last_issues}

        guard = self.state.guard
        if not guard.begin(ADD_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            snapshot = self.tracker.require_open(str(payload["shift"]), message=ADD_CLOSED_MESSAGE)
            result = self.state.staging.add({**payload, "arco_id": snapshot.arco_id, "fecha": self.today()})
        except ArqueoServiceError as exc:
            return self._fail(exc, ADD_ACTION)
        finally:
            guard.end(ADD_ACTION)
        if not result.ok:
            self.last_issues = [f"{issue.field}: {issue.reason}" for issue in result.issues]
            return {"ok": False, "error": "Por favor completa todos los campos correctamente", "issues": self.last_issues}
        self.last_issues = []
        return {"ok": True, "count": len(self.state.staging), "pending": self.state.staging.render()}

    def remove(self, index: int) -> dict[str, Any]:
        try:
            self.state.staging.remove(index)
        except IndexError as exc:
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "count": len(self.state.staging), "pending": self.state.staging.render()}

    def remove_entry(self, key: int) -> dict[str, Any]:
        try:
            self.state.staging.remove_key(key)
        except KeyError as exc:
            return {"ok": False, "error": str(exc.args[0]) if exc.args else "Movimiento inexistente"}
        return {"ok": True, "count": len(self.state.staging), "pending": self.state.staging.render()}

    def submit(self) -> dict[str, Any]:
        """Send the whole buffer in one batch; the buffer survives any failure."""
        if self.state.staging.is_empty:
            self.notifications.error("Movimientos", EMPTY_BATCH_MESSAGE)
            return {"ok": False, "error": EMPTY_BATCH_MESSAGE}
        guard = self.state.guard
        if not guard.begin(SUBMIT_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            self.tracker.require_open(self.state.shift, message=SUBMIT_CLOSED_MESSAGE)
            batch = self.state.staging.to_batch()
            self.service.submit_batch(batch)
        except ArqueoServiceError as exc:
            return self._fail(exc, SUBMIT_ACTION)
        finally:
            guard.end(SUBMIT_ACTION)
        self.state.staging.clear()
        self.tracker.refresh_balance()
        self.notifications.success("Movimientos", f"{len(batch)} movimiento(s) registrado(s)")
        logger.info("movements_submitted", extra={"count": len(batch)})
        return {"ok": True, "submitted": len(batch), "pending": self.state.staging.render()}

    def render(self) -> dict[str, Any]:
        return {
            "shift": self.state.shift,
            "pending": self.state.staging.render(),
            "count": len(self.state.staging),
            "can_submit": not self.state.staging.is_empty and not self.state.guard.is_busy(SUBMIT_ACTION),
            "busy": self.state.guard.is_busy(ADD_ACTION) or self.state.guard.is_busy(SUBMIT_ACTION),
            "issues": list(self.last_issues),
        }

    def _fail(self, exc: ArqueoServiceError, action: str) -> dict[str, Any]:
        presented = self.presenter.present(exc, action=action)
        self.state.trace_id = exc.trace_id
        self.notifications.error("Movimientos", presented.user_message, trace_id=exc.trace_id)
        return presented.as_result()
