from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from arqueo_app.services.errors import ArqueoServiceError


@dataclass(frozen=True)
class PresentedError:
    category: str
    user_message: str
    safe_to_retry: bool
    details: dict[str, Any]

    def as_result(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": self.user_message,
            "category": self.category,
            "retryable": self.safe_to_retry,
            "trace_id": self.details.get("trace_id"),
        }


class ErrorPresenter:
    """Turns service failures into the payload an action returns.

    Server business errors and validation issues keep their own text; only
    transport failures get a generic retry message.
    """

    _CATEGORY_BY_KIND = {
        "validation": "validation",
        "session": "session",
        "permission": "permission",
        "transport": "transport",
        "cancelled": "cancelled",
        "server": "server",
        "unknown": "unknown",
    }

    _GENERIC_MESSAGES = {
        "transport": "No se pudo conectar con el servidor. Intente nuevamente.",
        "unknown": "Ocurrió un error inesperado.",
    }

    def present(self, error: ArqueoServiceError, *, action: str) -> PresentedError:
        category = self._CATEGORY_BY_KIND.get(error.kind, "unknown")
        message = error.message.strip() or self._GENERIC_MESSAGES.get(category, "La operación falló")
        if category == "transport":
            message = self._GENERIC_MESSAGES["transport"]
        return PresentedError(
            category=category,
            user_message=message,
            safe_to_retry=category == "transport",
            details={
                "action": action,
                "trace_id": error.trace_id,
                "technical": error.details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
