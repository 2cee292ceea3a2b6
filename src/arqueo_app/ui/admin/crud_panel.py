from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from arqueo_app.services.admin_service import AdminService
from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.state import AppState
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE
from arqueo_app.ui.shared.error_presenter import ErrorPresenter
from arqueo_app.ui.shared.notification_center import NotificationCenter
from arqueo_app.ui.shared.state_widgets import StateWidget
from arqueo_app.ui.shared.view_state import resolve_state


@dataclass
class CrudPanel:
    """List/create/update/delete for one admin entity.

    The list is re-fetched after every successful write rather than patched
    locally.
    """

    service: AdminService
    state: AppState
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    presenter: ErrorPresenter = field(default_factory=ErrorPresenter)
    records: list[Any] = field(default_factory=list)
    error_message: str | None = None
    error_kind: str | None = None
    is_loading: bool = False

    entity: str = ""
    id_field: str = "id"
    title: str = ""
    empty_message: str = "No hay registros"
    created_message: str = "Registro creado"
    updated_message: str = "Registro actualizado"
    deleted_message: str = "Registro eliminado"

    @property
    def write_action(self) -> str:
        return f"admin.{self.entity}.write"

    def load(self) -> bool:
        self.is_loading = True
        try:
            self.records = self.service.list(self.entity)
        except ArqueoServiceError as exc:
            self.records = []
            self.error_message = self.presenter.present(exc, action=f"admin.{self.entity}.list").user_message
            self.error_kind = exc.kind
            self.notifications.error(self.title, self.error_message, trace_id=exc.trace_id)
            return False
        finally:
            self.is_loading = False
        self.error_message = None
        self.error_kind = None
        return True

    def find(self, record_id: int) -> Any | None:
        return next((record for record in self.records if getattr(record, self.id_field) == record_id), None)

    def create(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        return self._write(lambda: self.service.create(self.entity, self.create_payload(fields)), self.created_message)

    def update(self, record_id: int, fields: Mapping[str, Any]) -> dict[str, Any]:
        return self._write(
            lambda: self.service.update(self.entity, record_id, self.update_payload(fields)),
            self.updated_message,
        )

    def delete(self, record_id: int, *, confirmed: bool) -> dict[str, Any]:
        blocker = self.delete_blocker(record_id)
        if blocker:
            self.notifications.push(level="warning", title=self.title, message=blocker)
            return {"ok": False, "error": blocker, "blocked": True}
        if not confirmed:
            return {"ok": False, "error": "Confirme la eliminación", "needs_confirmation": True}
        return self._write(lambda: self.service.delete(self.entity, record_id), self.deleted_message)

    def create_payload(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        return dict(fields)

    def update_payload(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        return dict(fields)

    def delete_blocker(self, record_id: int) -> str | None:
        return None

    def project(self, record: Any) -> dict[str, Any]:
        return record.model_dump(mode="json")

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(self.records),
            error_kind=self.error_kind,
            empty_message=self.empty_message,
        )
        return {
            "title": self.title,
            "state": StateWidget(state, retry_action="load").render(),
            "rows": [self.project(record) for record in self.records],
            "busy": self.state.guard.is_busy(self.write_action),
        }

    def _write(self, call: Any, success_message: str) -> dict[str, Any]:
        guard = self.state.guard
        if not guard.begin(self.write_action):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            call()
        except ArqueoServiceError as exc:
            presented = self.presenter.present(exc, action=self.write_action)
            self.notifications.error(self.title, presented.user_message, trace_id=exc.trace_id)
            return presented.as_result()
        finally:
            guard.end(self.write_action)
        self.notifications.success(self.title, success_message)
        self.load()
        return {"ok": True, "count": len(self.records)}
