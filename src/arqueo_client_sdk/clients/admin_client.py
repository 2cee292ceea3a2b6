from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..exceptions import ConflictError, EntityInUseError
from ..models_admin import (
    AdminUser,
    Concept,
    ConceptWrite,
    PasswordReset,
    Role,
    RoleWrite,
    UserCreate,
    UserUpdate,
)
from .base import BaseClient, _coerce_model, _expect_list

ADMIN_PREFIX = "/api/admin"


@dataclass
class AdminClient(BaseClient):
    module: str = "admin"

    def list_roles(self) -> list[Role]:
        data = self._request("GET", f"{ADMIN_PREFIX}/roles", operation="roles.list")
        return [Role.model_validate(item) for item in _expect_list(data, "role list")]

    def create_role(self, payload: RoleWrite | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, RoleWrite)
        return self._write("POST", f"{ADMIN_PREFIX}/roles", request, "roles.create")

    def update_role(self, role_id: int, payload: RoleWrite | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, RoleWrite)
        return self._write("PUT", f"{ADMIN_PREFIX}/roles/{role_id}", request, "roles.update")

    def delete_role(self, role_id: int) -> None:
        self._delete(f"{ADMIN_PREFIX}/roles/{role_id}", "roles.delete")

    def list_users(self) -> list[AdminUser]:
        data = self._request("GET", f"{ADMIN_PREFIX}/usuarios", operation="users.list")
        return [AdminUser.model_validate(item) for item in _expect_list(data, "user list")]

    def create_user(self, payload: UserCreate | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, UserCreate)
        return self._write("POST", f"{ADMIN_PREFIX}/usuarios", request, "users.create")

    def update_user(self, user_id: int, payload: UserUpdate | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, UserUpdate)
        return self._write("PUT", f"{ADMIN_PREFIX}/usuarios/{user_id}", request, "users.update")

    def delete_user(self, user_id: int) -> None:
        self._delete(f"{ADMIN_PREFIX}/usuarios/{user_id}", "users.delete")

    def reset_password(self, user_id: int, payload: PasswordReset | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, PasswordReset)
        return self._write("POST", f"{ADMIN_PREFIX}/usuarios/{user_id}/reset-password", request, "users.reset_password")

    def list_concepts(self) -> list[Concept]:
        data = self._request("GET", f"{ADMIN_PREFIX}/conceptos", operation="concepts.list")
        return [Concept.model_validate(item) for item in _expect_list(data, "concept list")]

    def create_concept(self, payload: ConceptWrite | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, ConceptWrite)
        return self._write("POST", f"{ADMIN_PREFIX}/conceptos", request, "concepts.create")

    def update_concept(self, concept_id: int, payload: ConceptWrite | Mapping[str, Any]) -> Any:
        request = _coerce_model(payload, ConceptWrite)
        return self._write("PUT", f"{ADMIN_PREFIX}/conceptos/{concept_id}", request, "concepts.update")

    def delete_concept(self, concept_id: int) -> None:
        self._delete(f"{ADMIN_PREFIX}/conceptos/{concept_id}", "concepts.delete")

    def _write(self, method: str, path: str, request: Any, operation: str) -> Any:
        return self._request(
            method,
            path,
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation=operation,
        )

    def _delete(self, path: str, operation: str) -> None:
        try:
            self._request("DELETE", path, operation=operation)
        except ConflictError as exc:
            raise EntityInUseError(
                code=exc.code,
                message=exc.message,
                details=exc.details,
                trace_id=exc.trace_id,
                status_code=exc.status_code,
                raw_payload=exc.raw_payload,
            ) from exc
