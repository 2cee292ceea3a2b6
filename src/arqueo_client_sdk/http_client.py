from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    """Single transport for every backend call.

    Reads are never cached: session status must always reflect the server.
    Only GET/HEAD are retried; mutations go out exactly once.
    """

    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    _context_versions: dict[str, int] | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)
        if self._context_versions is None:
            self._context_versions = {}

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        form_body: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
        context_key: str | None = None,
        context_version: int | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        if json_body is not None and form_body is not None:
            raise ValueError("json_body and form_body are mutually exclusive")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        normalized_method = method.upper()
        url = self._build_url(path)
        can_retry = normalized_method in {"GET", "HEAD"}
        attempts = self.config.retries + 1 if can_retry else 1

        started = time.monotonic()
        if context_key and context_version is None:
            context_version = self.get_context_version(context_key)
        if context_key and not self._context_is_current(context_key, context_version):
            raise TransportError(
                code="REQUEST_CANCELLED",
                message="Request cancelled before dispatch",
                details={"type": "context_switched"},
                trace_id=trace_context.trace_id,
                status_code=0,
                raw_payload=None,
            )
        last_transport_error: Exception | None = None
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    data=form_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                last_transport_error = exc
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "transport_error", trace_context.trace_id)
                    logger.warning(
                        "http_transport_error",
                        extra={"method": normalized_method, "path": path, "error_type": type(exc).__name__},
                    )
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
                last_transport_error = None
            logger.debug("http_retry", extra={"method": normalized_method, "path": path, "attempt": attempt + 1})
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError(f"HTTP request failed without response: {last_transport_error}")

        if context_key and not self._context_is_current(context_key, context_version):
            raise TransportError(
                code="REQUEST_CANCELLED",
                message="Request cancelled due to context switch",
                details={"type": "context_switched"},
                trace_id=trace_context.trace_id,
                status_code=0,
                raw_payload=None,
            )

        trace_context.update_from_headers(response.headers)
        if response.ok:
            self._record_operation(module, operation, started, "success", trace_context.trace_id)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                # Some endpoints answer 200 with a plain-text body.
                return {"message": response.text}

        payload = None
        try:
            payload = response.json()
        except ValueError:
            payload = {"error": response.text.strip()} if response.text.strip() else None
        if not isinstance(payload, dict):
            payload = {"details": payload} if payload is not None else None
        trace_context.update_from_payload(payload or {})
        self._record_operation(module, operation, started, "error", trace_context.trace_id)
        logger.info(
            "http_error_response",
            extra={"method": normalized_method, "path": path, "status_code": response.status_code},
        )
        raise map_error(response.status_code, payload, trace_context.trace_id)

    def switch_context(self, context_key: str) -> int:
        current = self.get_context_version(context_key)
        new_version = current + 1
        if self._context_versions is None:
            self._context_versions = {}
        self._context_versions[context_key] = new_version
        return new_version

    def get_context_version(self, context_key: str) -> int:
        if self._context_versions is None:
            self._context_versions = {}
        return self._context_versions.get(context_key, 0)

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )

    def _context_is_current(self, context_key: str, context_version: int | None) -> bool:
        if context_version is None:
            return True
        return self.get_context_version(context_key) == context_version
