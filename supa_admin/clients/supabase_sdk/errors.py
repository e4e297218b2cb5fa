from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import httpx

REQUEST_ID_HEADERS = ("sb-request-id", "x-request-id", "X-Trace-ID")


@dataclass
class RemoteError(Exception):
    """A failed call to the hosted backend. ``message`` is shown to the user verbatim."""

    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    trace_id: str | None = None
    status_code: int = 0

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class AuthError(RemoteError):
    """Authentication failed or the session is no longer valid."""


class PermissionDeniedError(RemoteError):
    """Row level security or role policy rejected the call."""


class NotFoundError(RemoteError):
    pass


class ConflictError(RemoteError):
    """409, usually a unique constraint on the users table."""


class ServerError(RemoteError):
    pass


class TransportError(RemoteError):
    """Network failure before an HTTP response was returned."""


def _payload_message(payload: Mapping[str, Any]) -> str | None:
    for key in ("message", "msg", "error_description", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _payload_code(payload: Mapping[str, Any]) -> str | None:
    for key in ("code", "error_code", "error"):
        value = payload.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def map_error(status_code: int, payload: Any, trace_id: str | None) -> RemoteError:
    body = payload if isinstance(payload, Mapping) else {}
    code = _payload_code(body) or "HTTP_ERROR"
    message = _payload_message(body) or (payload if isinstance(payload, str) and payload else "Request failed")
    details = body.get("details") if body else payload
    mapped: type[RemoteError]
    if status_code == 401:
        mapped = AuthError
    elif status_code == 403:
        mapped = PermissionDeniedError
    elif status_code in {404, 406}:
        mapped = NotFoundError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = RemoteError
    return mapped(
        code=code,
        message=str(message),
        details=details,
        trace_id=trace_id,
        status_code=status_code,
    )


def from_http_response(response: httpx.Response) -> RemoteError:
    trace_id = next((response.headers[name] for name in REQUEST_ID_HEADERS if name in response.headers), None)
    try:
        payload = response.json()
    except ValueError:
        payload = response.text or None
    return map_error(response.status_code, payload, trace_id)
