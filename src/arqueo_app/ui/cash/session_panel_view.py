from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable

from arqueo_client_sdk import SHIFTS, parse_amount

from arqueo_app.formatting import format_currency
from arqueo_app.reconciliation import BillCounter, Reconciliation
from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.services.session_tracker import SessionTracker
from arqueo_app.state import AppState
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE
from arqueo_app.ui.shared.error_presenter import ErrorPresenter
from arqueo_app.ui.shared.notification_center import NotificationCenter

logger = logging.getLogger(__name__)

TOGGLE_ACTION = "session.toggle"
OPEN_ACTION = "session.open"
CLOSE_ACTION = "session.close"


class ClosePhase(str, Enum):
    IDLE = "idle"
    COUNTING = "counting"
    WITHDRAWAL = "withdrawal"


@dataclass
class SessionPanelView:
    """Dashboard toggle: open a session, or walk the count and withdrawal steps to close it."""

    tracker: SessionTracker
    state: AppState
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    presenter: ErrorPresenter = field(default_factory=ErrorPresenter)
    counter: BillCounter = field(default_factory=BillCounter)
    phase: ClosePhase = ClosePhase.IDLE
    reconciliation: Reconciliation | None = None
    error_message: str | None = None

    def load(self) -> dict[str, Any]:
        self.tracker.load_current()
        self.tracker.refresh_balance()
        return self.render()

    def change_shift(self, shift: str) -> dict[str, Any]:
        normalized = (shift or "").strip().upper()
        if normalized not in SHIFTS:
            return {"ok": False, "error": f"Turno inválido: {shift!r}"}
        self.state.shift = normalized
        snapshot = self.tracker.fetch_status(normalized)
        return {"ok": True, "is_open": bool(snapshot and snapshot.is_open), "panel": self.render()}

    def open(self, shift: str | None = None) -> dict[str, Any]:
        guard = self.state.guard
        if not guard.begin(OPEN_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            snapshot = self.tracker.open(shift)
        except ArqueoServiceError as exc:
            return self._fail(exc, OPEN_ACTION, "No se pudo abrir el arco")
        finally:
            guard.end(OPEN_ACTION)
        self.notifications.success("Arco", "Arco abierto correctamente")
        return {"ok": True, "is_open": bool(snapshot and snapshot.is_open), "panel": self.render()}

    def toggle(self) -> dict[str, Any]:
        if self.state.session.is_open:
            return self.start_close()
        guard = self.state.guard
        if not guard.begin(TOGGLE_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            snapshot = self.tracker.open_advanced(self.state.shift)
        except ArqueoServiceError as exc:
            return self._fail(exc, TOGGLE_ACTION, "Error al abrir el arqueo")
        finally:
            guard.end(TOGGLE_ACTION)
        self.notifications.success("Arqueo", "Nuevo arqueo abierto correctamente")
        return {"ok": True, "arco_id": snapshot.arco_id, "panel": self.render()}

    def start_close(self) -> dict[str, Any]:
        if not self.state.session.is_open:
            return {"ok": False, "error": "No hay un arco abierto para cerrar"}
        self.counter.reset(self.state.balance.total)
        self.reconciliation = self.counter.recompute()
        self.phase = ClosePhase.COUNTING
        return {"ok": True, "phase": self.phase.value, "reconciliation": self.reconciliation.render()}

    def set_count(self, denomination: int, value: Any) -> dict[str, Any]:
        return self._count_step(lambda: self.counter.set_count(denomination, value))

    def increment(self, denomination: int) -> dict[str, Any]:
        return self._count_step(lambda: self.counter.increment(denomination))

    def decrement(self, denomination: int) -> dict[str, Any]:
        return self._count_step(lambda: self.counter.decrement(denomination))

    def set_rest(self, value: Any) -> dict[str, Any]:
        return self._count_step(lambda: self.counter.set_rest(value))

    def confirm_count(self) -> dict[str, Any]:
        if self.phase is not ClosePhase.COUNTING:
            return {"ok": False, "error": "No hay un conteo en curso"}
        if self.state.session.arco_id is None:
            self.cancel_close()
            self.notifications.error("Arqueo", "No se puede cerrar el arco: ID desconocido")
            return {"ok": False, "error": "No se puede cerrar el arco: ID desconocido"}
        self.reconciliation = self.counter.recompute()
        self.phase = ClosePhase.WITHDRAWAL
        return {"ok": True, "phase": self.phase.value, "reconciliation": self.reconciliation.render()}

    def cancel_close(self) -> dict[str, Any]:
        self.phase = ClosePhase.IDLE
        self.reconciliation = None
        return {"ok": True, "phase": self.phase.value}

    def confirm_withdrawal(self, amount: Any = None) -> dict[str, Any]:
        """Close the session, carrying the withdrawal in the same request when positive."""
        if self.phase is not ClosePhase.WITHDRAWAL:
            return {"ok": False, "error": "Confirme el conteo antes del retiro"}
        withdrawal: Decimal | None = None
        if amount not in (None, ""):
            withdrawal = parse_amount(amount)
            if withdrawal is None or withdrawal < 0:
                return {"ok": False, "error": "retiro_amount: debe ser un número mayor o igual a 0"}
        guard = self.state.guard
        if not guard.begin(CLOSE_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            self.tracker.close(withdrawal if withdrawal and withdrawal > 0 else None)
        except ArqueoServiceError as exc:
            self.phase = ClosePhase.IDLE
            return self._fail(exc, CLOSE_ACTION, "Error al cerrar el arqueo")
        finally:
            guard.end(CLOSE_ACTION)
        self.phase = ClosePhase.IDLE
        self.reconciliation = None
        message = "Arqueo cerrado y retiro registrado" if withdrawal and withdrawal > 0 else "Arqueo cerrado"
        self.notifications.success("Arqueo", message)
        return {"ok": True, "panel": self.render()}

    def render(self) -> dict[str, Any]:
        session = self.state.session
        balance = self.state.balance
        return {
            "is_open": session.is_open,
            "arco_id": session.arco_id,
            "shift": self.state.shift,
            "title": "Arqueo abierto" if session.is_open else "Arqueo cerrado",
            "subtitle": (
                "Presiona para cerrar el arqueo actual" if session.is_open else "Presiona para abrir un nuevo arqueo"
            ),
            "balance": format_currency(balance.total),
            "balance_indicator": balance.indicator,
            "opening_balance": format_currency(balance.opening),
            "income": format_currency(balance.income),
            "expense": format_currency(balance.expense),
            "phase": self.phase.value,
            "reconciliation": self.reconciliation.render() if self.reconciliation else None,
            "busy": any(
                self.state.guard.is_busy(action) for action in (TOGGLE_ACTION, OPEN_ACTION, CLOSE_ACTION)
            ),
            "error": self.error_message,
        }

    def _count_step(self, apply: Callable[[], object]) -> dict[str, Any]:
        if self.phase is not ClosePhase.COUNTING:
            return {"ok": False, "error": "No hay un conteo en curso"}
        try:
            apply()
        except KeyError as exc:
            return {"ok": False, "error": str(exc)}
        self.reconciliation = self.counter.recompute()
        return {"ok": True, "reconciliation": self.reconciliation.render()}

    def _fail(self, exc: ArqueoServiceError, action: str, title: str) -> dict[str, Any]:
        presented = self.presenter.present(exc, action=action)
        self.error_message = presented.user_message
        self.state.trace_id = exc.trace_id
        self.notifications.error(title, presented.user_message, trace_id=exc.trace_id)
        logger.info("session_action_failed", extra={"action": action, "category": presented.category})
        return presented.as_result()
