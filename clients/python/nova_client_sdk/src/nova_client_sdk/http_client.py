from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin

import requests

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

ResponseHook = Callable[[requests.Response], None]
RequestHook = Callable[[str, str, dict[str, Any]], None]

Payload = dict[str, Any] | list[Any] | str | None


@dataclass
class LastOperation:
    method: str
    path: str
    duration_ms: int
    status_code: int
    trace_id: str | None


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
        if self.trace is None:
            self.trace = TraceContext()

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
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        retry_mutation: bool = False,
    ) -> Payload:
        """Send one API call and return the decoded body.

        GET/HEAD calls (and mutations flagged ``retry_mutation``, which should
        carry an idempotency key) are retried on transport errors and 5xx
        responses with exponential backoff. Error envelopes are raised as the
        matching ``ApiError`` subclass.
        """
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        normalized_method = method.upper()
        url = self._build_url(path)
        if self.before_request:
            self.before_request(
                normalized_method,
                url,
                {"headers": request_headers, "json_body": json_body, "params": params},
            )

        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1
        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    files=files,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request finished without a response")

        if self.after_response:
            self.after_response(response)
        trace_context.update_from_headers(response.headers)
        self.last_operation = LastOperation(
            method=normalized_method,
            path=path,
            duration_ms=int((time.monotonic() - started) * 1000),
            status_code=response.status_code,
            trace_id=trace_context.trace_id,
        )

        if response.ok:
            if not response.content:
                return None
            if "json" not in response.headers.get("Content-Type", "application/json"):
                return response.text
            return response.json()

        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = {"message": response.text}
        if isinstance(payload, dict):
            trace_context.update_from_payload(payload)
        else:
            payload = {"message": str(payload)}
        raise map_error(response.status_code, payload, trace_context.trace_id)
