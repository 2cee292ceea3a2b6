from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from arqueo_client_sdk import ClientValidationError, to_user_facing_error
from arqueo_client_sdk.exceptions import ApiError, ForbiddenError, SessionNotOpenError, TransportError


@dataclass(frozen=True)
class ArqueoServiceError(RuntimeError):
    message: str
    details: str | None = None
    trace_id: str | None = None
    kind: str = "server"

    def __str__(self) -> str:
        return self.message


def issues_text(issues: list) -> str:
    return "; ".join(f"{issue.field}: {issue.reason}" for issue in issues)


def normalize_error(exc: Exception, *, fallback: str = "Unexpected client error") -> ArqueoServiceError:
    """Collapse SDK and model failures into the error kinds the views tell apart."""
    if isinstance(exc, ArqueoServiceError):
        return exc
    if isinstance(exc, ClientValidationError):
        return ArqueoServiceError(message=issues_text(exc.issues), kind="validation")
    if isinstance(exc, PydanticValidationError):
        return ArqueoServiceError(message=_pydantic_text(exc), kind="validation")
    if isinstance(exc, SessionNotOpenError):
        return ArqueoServiceError(message=exc.message, trace_id=exc.trace_id, kind="session")
    if isinstance(exc, TransportError):
        facing = to_user_facing_error(exc)
        return ArqueoServiceError(
            message=facing.message,
            details=facing.details,
            trace_id=facing.trace_id,
            kind="cancelled" if exc.code == "REQUEST_CANCELLED" else "transport",
        )
    if isinstance(exc, ApiError):
        facing = to_user_facing_error(exc)
        if isinstance(exc, ForbiddenError):
            return ArqueoServiceError(
                message=facing.message, details=facing.details, trace_id=facing.trace_id, kind="permission"
            )
        return ArqueoServiceError(message=facing.message, details=facing.details, trace_id=facing.trace_id)
    return ArqueoServiceError(message=str(exc) or fallback, kind="unknown")


def _pydantic_text(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "is invalid")).removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid input"
