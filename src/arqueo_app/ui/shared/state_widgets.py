from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from arqueo_app.ui.shared.view_state import ViewState

_ICONS = {
    "loading": "spinner",
    "empty": "inbox",
    "success": "check",
    "partial_error": "warning",
    "fatal_error": "error",
    "no_permission": "lock",
}


@dataclass(frozen=True)
class StateWidget:
    state: ViewState
    retry_action: str | None = None

    def render(self) -> dict[str, Any]:
        payload = self.state.render()
        payload["icon"] = _ICONS[payload["status"]]
        if self.retry_action and payload["status"] in {"fatal_error", "partial_error"}:
            payload["retry_action"] = self.retry_action
        return payload
