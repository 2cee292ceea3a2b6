from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from arqueo_client_sdk import AdminUser, Role

from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.ui.admin.crud_panel import CrudPanel
from arqueo_app.ui.shared.action_guard import BUSY_MESSAGE

RESET_ACTION = "admin.users.reset_password"
UPDATE_FIELDS = ("full_name", "role_id", "is_active")


@dataclass
class UsersPanel(CrudPanel):
    entity: str = "users"
    id_field: str = "user_id"
    title: str = "Usuarios"
    empty_message: str = "No hay usuarios registrados"
    created_message: str = "Usuario creado correctamente"
    updated_message: str = "Usuario actualizado correctamente"
    deleted_message: str = "Usuario eliminado correctamente"
    roles: list[Role] = field(default_factory=list)

    def load(self) -> bool:
        if not super().load():
            return False
        try:
            self.roles = self.service.list("roles")
        except ArqueoServiceError as exc:
            self.roles = []
            self.notifications.error(self.title, exc.message, trace_id=exc.trace_id)
        return True

    def update_payload(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        # The edit form always sends name, role and active flag together.
        return {key: fields.get(key) for key in UPDATE_FIELDS if key in fields}

    def reset_password(self, user_id: int, new_password: str) -> dict[str, Any]:
        guard = self.state.guard
        if not guard.begin(RESET_ACTION):
            return {"ok": False, "error": BUSY_MESSAGE}
        try:
            self.service.reset_password(user_id, new_password)
        except ArqueoServiceError as exc:
            presented = self.presenter.present(exc, action=RESET_ACTION)
            self.notifications.error(self.title, presented.user_message, trace_id=exc.trace_id)
            return presented.as_result()
        finally:
            guard.end(RESET_ACTION)
        self.notifications.success(self.title, "Contraseña restablecida correctamente")
        return {"ok": True}

    def role_options(self) -> list[dict[str, Any]]:
        return [{"value": role.role_id, "label": role.role_name} for role in self.roles]

    def project(self, record: AdminUser) -> dict[str, Any]:
        return {
            "user_id": record.user_id,
            "full_name": record.full_name or "",
            "email": record.email or "",
            "role": record.role.role_name if record.role and record.role.role_name else "",
            "role_id": record.role_id,
            "is_active": record.is_active,
            "status": "Activo" if record.is_active else "Inactivo",
        }
