from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError, TransportError

TRANSPORT_MESSAGE = "No se pudo conectar con el servidor. Intente nuevamente."


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    trace_id: str | None = None
    retryable: bool = False

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    """Server ``error`` text is shown verbatim; transport failures get a generic retry hint."""
    if isinstance(exc, TransportError):
        return UserFacingError(
            message=TRANSPORT_MESSAGE,
            details=f"{exc.code}: {exc.message}",
            trace_id=exc.trace_id,
            retryable=exc.code != "REQUEST_CANCELLED",
        )
    primary = exc.message.strip() or "Request failed"
    details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(
        message=primary,
        details=details,
        trace_id=exc.trace_id,
        retryable=exc.status_code >= 500,
    )
