from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from arqueo_client_sdk import AdminUser, Role

from arqueo_app.services.errors import ArqueoServiceError
from arqueo_app.ui.admin.crud_panel import CrudPanel


@dataclass
class RolesPanel(CrudPanel):
    """Role admin. A role still assigned to users cannot be deleted."""

    entity: str = "roles"
    id_field: str = "role_id"
    title: str = "Roles"
    empty_message: str = "No hay roles registrados"
    created_message: str = "Rol creado correctamente"
    updated_message: str = "Rol actualizado correctamente"
    deleted_message: str = "Rol eliminado correctamente"
    users: list[AdminUser] = field(default_factory=list)

    def load(self) -> bool:
        if not super().load():
            return False
        try:
            self.users = self.service.list("users")
        except ArqueoServiceError as exc:
            self.users = []
            self.notifications.error(self.title, exc.message, trace_id=exc.trace_id)
        return True

    def user_counts(self) -> Counter[int]:
        return Counter(user.role_id for user in self.users if user.role_id is not None)

    def delete_blocker(self, record_id: int) -> str | None:
        assigned = self.user_counts().get(record_id, 0)
        if assigned > 0:
            return f"No se puede eliminar el rol: tiene {assigned} usuario(s) asignado(s)"
        return None

    def project(self, record: Role) -> dict[str, Any]:
        count = self.user_counts().get(record.role_id, 0)
        return {
            "role_id": record.role_id,
            "role_name": record.role_name,
            "user_count": count,
            "can_delete": count == 0,
        }
