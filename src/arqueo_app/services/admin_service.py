from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from arqueo_client_sdk import ApiSession, require_valid, validate_new_password

from arqueo_app.services.errors import normalize_error

logger = logging.getLogger(__name__)

_OPERATIONS: dict[str, dict[str, str]] = {
    "roles": {"list": "list_roles", "create": "create_role", "update": "update_role", "delete": "delete_role"},
    "users": {"list": "list_users", "create": "create_user", "update": "update_user", "delete": "delete_user"},
    "concepts": {
        "list": "list_concepts",
        "create": "create_concept",
        "update": "update_concept",
        "delete": "delete_concept",
    },
}


class AdminService:
    """One REST call per admin operation, errors normalized for the panels."""

    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def list(self, entity: str) -> list[Any]:
        return self._call(entity, "list")

    def create(self, entity: str, fields: Mapping[str, Any]) -> Any:
        return self._call(entity, "create", dict(fields))

    def update(self, entity: str, record_id: int, fields: Mapping[str, Any]) -> Any:
        return self._call(entity, "update", record_id, dict(fields))

    def delete(self, entity: str, record_id: int) -> None:
        self._call(entity, "delete", record_id)

    def reset_password(self, user_id: int, new_password: str) -> None:
        try:
            require_valid(validate_new_password(new_password))
            self.session.admin_client().reset_password(user_id, {"new_password": new_password})
        except Exception as exc:
            raise normalize_error(exc) from exc
        logger.info("admin_password_reset", extra={"user_id": user_id})

    def _call(self, entity: str, operation: str, *args: Any) -> Any:
        if entity not in _OPERATIONS:
            raise ValueError(f"Unknown admin entity: {entity}")
        method: Callable[..., Any] = getattr(self.session.admin_client(), _OPERATIONS[entity][operation])
        try:
            result = method(*args)
        except Exception as exc:
            raise normalize_error(exc) from exc
        if operation != "list":
            logger.info("admin_write", extra={"entity": entity, "operation": operation})
        return result
