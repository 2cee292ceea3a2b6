from __future__ import annotations

from arqueo_client_sdk import ApiError, TransportError, to_user_facing_error
from arqueo_client_sdk.ui_errors import TRANSPORT_MESSAGE


def test_server_message_is_shown_verbatim() -> None:
    err = ApiError(code="HTTP_400", message="El arco ya está cerrado", details=None, trace_id="t-1", status_code=400)
    facing = to_user_facing_error(err)
    assert facing.message == "El arco ya está cerrado"
    assert facing.trace_id == "t-1"
    assert facing.retryable is False


def test_transport_errors_get_generic_retry_message() -> None:
    err = TransportError(code="TRANSPORT_ERROR", message="refused", details=None, trace_id=None, status_code=0)
    facing = to_user_facing_error(err)
    assert facing.message == TRANSPORT_MESSAGE
    assert facing.retryable is True
    assert "refused" in facing.technical_details


def test_cancelled_requests_are_not_retryable() -> None:
    err = TransportError(code="REQUEST_CANCELLED", message="switched", details=None, trace_id=None, status_code=0)
    assert to_user_facing_error(err).retryable is False
