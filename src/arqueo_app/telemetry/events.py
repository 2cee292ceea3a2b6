from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

TELEMETRY_CATEGORIES = {"auth", "navigation", "api_call_result", "cash_session", "export", "error"}
_FORBIDDEN_CONTEXT_KEYS = {
    "email",
    "password",
    "new_password",
    "full_name",
    "token",
    "access_token",
    "authorization",
    "details",
}


@dataclass(frozen=True)
class TelemetryEvent:
    category: str
    name: str
    area: str
    action: str
    timestamp_utc: str
    trace_id: str | None = None
    duration_ms: int | None = None
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


def _check_context(context: dict[str, Any] | None) -> None:
    if not context:
        return
    illegal = sorted(key for key in context if key.lower() in _FORBIDDEN_CONTEXT_KEYS)
    if illegal:
        raise ValueError(f"Personal data keys are not allowed in telemetry context: {illegal}")


def build_event(
    *,
    category: str,
    name: str,
    area: str,
    action: str,
    trace_id: str | None = None,
    duration_ms: int | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    if category not in TELEMETRY_CATEGORIES:
        raise ValueError(f"Unsupported telemetry category: {category}")
    _check_context(context)
    return TelemetryEvent(
        category=category,
        name=name,
        area=area,
        action=action,
        timestamp_utc=(now or datetime.now(timezone.utc)).isoformat(),
        trace_id=trace_id,
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context=context,
    )
