from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from supa_admin.clients.supabase_sdk.config import ClientConfig
from supa_admin.clients.supabase_sdk.errors import AuthError, RemoteError, TransportError, from_http_response

JsonPayload = dict[str, Any] | list[Any] | None


class HttpClient:
    """Async transport shared by the auth and table clients.

    Every call is attempted exactly once: failures surface as ``RemoteError`` and
    are retried only by a new explicit user action.
    """

    def __init__(
        self,
        config: ClientConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            verify=config.verify_ssl,
        )
        self._auth_error_handler: Callable[[RemoteError], None] | None = None

    def register_auth_error_handler(self, handler: Callable[[RemoteError], None] | None) -> None:
        self._auth_error_handler = handler

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        api_key: str | None = None,
        json_body: dict[str, Any] | list[Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> JsonPayload:
        key = api_key or self.config.anon_key
        request_headers = {"Accept": "application/json", "apikey": key}
        request_headers["Authorization"] = f"Bearer {token or key}"
        if headers:
            request_headers.update(headers)

        normalized_path = path if path.startswith("/") else f"/{path}"
        try:
            response = await self._client.request(
                method=method.upper(),
                url=normalized_path,
                json=json_body,
                params=params,
                headers=request_headers,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                code="TIMEOUT_ERROR",
                message="La solicitud excedió el tiempo de espera. Verifica tu red y vuelve a intentar.",
                details=str(exc),
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                code="NETWORK_ERROR",
                message="No se pudo conectar con el servidor. Reintenta manualmente.",
                details=str(exc),
            ) from exc

        if response.status_code >= 400:
            error = from_http_response(response)
            if isinstance(error, AuthError) and self._auth_error_handler:
                self._auth_error_handler(error)
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def aclose(self) -> None:
        await self._client.aclose()
