from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

LEVELS = ("info", "success", "warning", "error")


@dataclass
class NotificationCenter:
    messages: list[dict[str, Any]] = field(default_factory=list)

    def push(self, *, level: str, title: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
        if level not in LEVELS:
            raise ValueError(f"Unsupported notification level: {level}")
        payload = {
            "level": level,
            "title": title,
            "message": message,
            "details": details or {},
        }
        self.messages.append(payload)
        return payload

    def success(self, title: str, message: str) -> dict[str, Any]:
        return self.push(level="success", title=title, message=message)

    def error(self, title: str, message: str, *, trace_id: str | None = None) -> dict[str, Any]:
        return self.push(level="error", title=title, message=message, details={"trace_id": trace_id} if trace_id else None)

    def latest(self) -> dict[str, Any] | None:
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        self.messages.clear()

    def render(self) -> dict[str, Any]:
        return {"count": len(self.messages), "messages": list(self.messages)}
