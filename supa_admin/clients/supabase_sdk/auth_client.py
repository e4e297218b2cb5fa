from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from supa_admin.clients.supabase_sdk.errors import PermissionDeniedError
from supa_admin.clients.supabase_sdk.http_client import HttpClient
from supa_admin.clients.supabase_sdk.models import AuthUser, OAuthRedirect, SignUpResponse, TokenResponse


class AuthClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client
        self._prefix = http_client.config.auth_prefix

    async def sign_in_with_password(self, email: str, password: str) -> TokenResponse:
        payload = await self.http_client.request(
            "POST",
            f"{self._prefix}/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
        )
        return TokenResponse.model_validate(payload or {})

    async def sign_up(self, email: str, password: str, *, redirect_to: str | None = None) -> SignUpResponse:
        params = {"redirect_to": redirect_to} if redirect_to else None
        payload = await self.http_client.request(
            "POST",
            f"{self._prefix}/signup",
            params=params,
            json_body={"email": email, "password": password},
        )
        return SignUpResponse.model_validate(payload or {})

    async def refresh_session(self, refresh_token: str) -> TokenResponse:
        payload = await self.http_client.request(
            "POST",
            f"{self._prefix}/token",
            params={"grant_type": "refresh_token"},
            json_body={"refresh_token": refresh_token},
        )
        return TokenResponse.model_validate(payload or {})

    async def get_user(self, access_token: str) -> AuthUser:
        payload = await self.http_client.request("GET", f"{self._prefix}/user", token=access_token)
        return AuthUser.model_validate(payload or {})

    async def sign_out(self, access_token: str) -> None:
        await self.http_client.request("POST", f"{self._prefix}/logout", token=access_token)

    async def invite_user_by_email(
        self,
        email: str,
        *,
        data: dict[str, Any] | None = None,
        redirect_to: str | None = None,
    ) -> AuthUser:
        service_key = self.http_client.config.service_role_key
        if not service_key:
            raise PermissionDeniedError(
                code="SERVICE_ROLE_REQUIRED",
                message="Invitar usuarios requiere SUPA_ADMIN_SERVICE_ROLE_KEY.",
            )
        params = {"redirect_to": redirect_to} if redirect_to else None
        payload = await self.http_client.request(
            "POST",
            f"{self._prefix}/invite",
            api_key=service_key,
            params=params,
            json_body={"email": email, "data": data or {}},
        )
        return AuthUser.model_validate(payload or {})

    def authorize_url(
        self,
        provider: str,
        *,
        redirect_to: str | None = None,
        query_params: dict[str, str] | None = None,
    ) -> OAuthRedirect:
        query = {"provider": provider}
        if redirect_to:
            query["redirect_to"] = redirect_to
        query.update(query_params or {})
        base = self.http_client.config.base_url.rstrip("/")
        return OAuthRedirect(provider=provider, url=f"{base}{self._prefix}/authorize?{urlencode(query)}")
