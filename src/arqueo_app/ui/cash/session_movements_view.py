from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from arqueo_client_sdk import PersistedMovement

from arqueo_app.formatting import format_currency
from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.services.movements_service import MovementsService
from arqueo_app.services.session_tracker import SessionTracker
from arqueo_app.state import AppState
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE
from arqueo_app.ui.shared.error_presenter import ErrorPresenter
from arqueo_app.ui.shared.notification_center import NotificationCenter
from arqueo_app.ui.shared.state_widgets import StateWidget
from arqueo_app.ui.shared.view_state import resolve_state

DELETE_ACTION = "movements.delete"


@dataclass
class SessionMovementsView:
    """Persisted movements of the current session, optionally limited to one type."""

    service: MovementsService
    tracker: SessionTracker
    state: AppState
    movement_type: str | None = None
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    presenter: ErrorPresenter = field(default_factory=ErrorPresenter)
    rows: list[PersistedMovement] = field(default_factory=list)
    error_message: str | None = None
    error_kind: str | None = None
    is_loading: bool = False

    def load(self) -> bool:
        self.is_loading = True
        try:
            snapshot = self.tracker.current_status()
            if not snapshot.is_open or snapshot.arco_id is None:
                self.rows = []
                self.error_message = None
                self.error_kind = None
                return True
            response = self.service.list_for_arco(snapshot.arco_id)
        except ArqueoServiceError as exc:
            self.rows = []
            self.error_message = self.presenter.present(exc, action="movements.list").user_message
            self.error_kind = exc.kind
            return False
        finally:
            self.is_loading = False
        self.rows = [
            row for row in response.movements if self.movement_type is None or row.movement_type == self.movement_type
        ]
        self.error_message = None
        self.error_kind = None
        return True

    def delete(self, movement_id: int, *, confirmed: bool) -> dict[str, Any]:
        if not confirmed:
            return {"ok": False, "error": "Confirme la eliminación del movimiento", "needs_confirmation": True}
        guard = self.state.guard
        if not guard.begin(DELETE_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            self.service.delete(movement_id)
        except ArqueoServiceError as exc:
            presented = self.presenter.present(exc, action=DELETE_ACTION)
            self.notifications.error("Movimientos", presented.user_message, trace_id=exc.trace_id)
            return presented.as_result()
        finally:
            guard.end(DELETE_ACTION)
        self.notifications.success("Movimientos", "Movimiento eliminado correctamente")
        self.load()
        return {"ok": True, "count": len(self.rows)}

    def render(self) -> dict[str, Any]:
        empty_message = "No hay egresos registrados" if self.movement_type == "Egreso" else "No hay movimientos registrados"
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(self.rows),
            error_kind=self.error_kind,
            empty_message=empty_message,
        )
        return {
            "state": StateWidget(state, retry_action="load").render(),
            "rows": [
                {
                    "movement_id": row.movement_id,
                    "movement_type": row.movement_type,
                    "amount": format_currency(row.amount),
                    "details": row.details or "",
                    "movement_date": row.movement_date.isoformat()
                    if hasattr(row.movement_date, "isoformat")
                    else row.movement_date,
                    "concept_id": row.concept_id,
                }
                for row in self.rows
            ],
            "busy": self.state.guard.is_busy(DELETE_ACTION),
        }
