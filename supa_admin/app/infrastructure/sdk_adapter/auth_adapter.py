from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

from supa_admin.app.domain.mappers.user_mapper import map_profile
from supa_admin.app.domain.models.user import Profile, UserStatus
from supa_admin.app.infrastructure.logging.logger import get_logger, log_action
from supa_admin.app.session_guard import validate_token
from supa_admin.clients.supabase_sdk.auth_client import AuthClient
from supa_admin.clients.supabase_sdk.auth_store import AuthStore
from supa_admin.clients.supabase_sdk.errors import AuthError, RemoteError
from supa_admin.clients.supabase_sdk.http_client import HttpClient
from supa_admin.clients.supabase_sdk.models import AuthUser, OAuthRedirect, SessionData, SignUpResponse, TokenResponse
from supa_admin.clients.supabase_sdk.users_client import UsersClient

MODULE = "auth"


@dataclass(frozen=True)
class SessionStatus:
    present: bool


@dataclass(frozen=True)
class CallbackTokens:
    access_token: str
    refresh_token: str


def _session_from_tokens(response: TokenResponse) -> SessionData:
    return SessionData(
        access_token=response.access_token,
        refresh_token=response.refresh_token,
        expires_at=response.expires_at,
        user=response.user,
    )


def _missing_session() -> AuthError:
    return AuthError(code="SESSION_MISSING", message="No hay una sesión activa.", status_code=401)


class AuthService:
    def __init__(
        self,
        http: HttpClient,
        auth_store: AuthStore,
        *,
        site_redirect_url: str | None = None,
        oauth_redirect_url: str | None = None,
        legacy_users_shape: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.auth_store = auth_store
        self.auth_client = AuthClient(http)
        self.users_client = UsersClient(http, token_provider=self._access_token)
        self.site_redirect_url = site_redirect_url
        self.oauth_redirect_url = oauth_redirect_url
        self.legacy_users_shape = legacy_users_shape
        self.logger = logger or get_logger("supa_admin.auth")

    def _access_token(self) -> str | None:
        session = self.auth_store.load()
        return session.access_token if session else None

    def handle_auth_error(self, error: RemoteError) -> None:
        """Registered on the http client: a rejected token drops the stored session."""
        self.auth_store.clear()
        log_action(self.logger, MODULE, "session_rejected", "cleared", trace_id=error.trace_id, level=logging.WARNING)

    async def current_session(self) -> SessionStatus:
        session = self.auth_store.load()
        if session is None:
            return SessionStatus(present=False)
        validation = validate_token(session.access_token, expires_at=session.expires_at)
        if validation.valid:
            return SessionStatus(present=True)
        if validation.reason == "expired_token" and session.refresh_token:
            try:
                refreshed = await self.auth_client.refresh_session(session.refresh_token)
            except RemoteError as error:
                self.auth_store.clear()
                log_action(self.logger, MODULE, "refresh", "error", trace_id=error.trace_id, level=logging.WARNING)
                return SessionStatus(present=False)
            self.auth_store.save(_session_from_tokens(refreshed))
            log_action(self.logger, MODULE, "refresh", "success")
            return SessionStatus(present=True)
        self.auth_store.clear()
        log_action(self.logger, MODULE, "session_check", validation.reason or "invalid_session")
        return SessionStatus(present=False)

    async def sign_in(self, email: str, password: str) -> Profile:
        try:
            response = await self.auth_client.sign_in_with_password(email, password)
        except RemoteError as error:
            log_action(self.logger, MODULE, "sign_in", "error", trace_id=error.trace_id, level=logging.WARNING)
            raise
        self.auth_store.save(_session_from_tokens(response))
        log_action(self.logger, MODULE, "sign_in", "success", actor=response.user.id if response.user else None)
        return map_profile(response.user or {})

    async def sign_up(self, email: str, password: str) -> SignUpResponse:
        try:
            response = await self.auth_client.sign_up(email, password, redirect_to=self.site_redirect_url)
        except RemoteError as error:
            log_action(self.logger, MODULE, "sign_up", "error", trace_id=error.trace_id, level=logging.WARNING)
            raise
        if response.has_session:
            self.auth_store.save(
                SessionData(
                    access_token=response.access_token or "",
                    refresh_token=response.refresh_token,
                    user=response.user,
                )
            )
        log_action(self.logger, MODULE, "sign_up", "success" if response.has_session else "pending_confirmation")
        return response

    async def sign_out(self) -> None:
        session = self.auth_store.load()
        try:
            if session is not None:
                await self.auth_client.sign_out(session.access_token)
        finally:
            self.auth_store.clear()
            log_action(self.logger, MODULE, "sign_out", "done")

    def sign_in_with_oauth(self, provider: str = "google") -> OAuthRedirect:
        redirect = self.auth_client.authorize_url(
            provider,
            redirect_to=self.oauth_redirect_url,
            query_params={"prompt": "select_account"},
        )
        log_action(self.logger, MODULE, "sign_in_oauth", "redirect")
        return redirect

    async def get_current_user(self) -> Profile:
        session = self.auth_store.load()
        if session is None:
            raise _missing_session()
        user = await self.auth_client.get_user(session.access_token)
        return map_profile(user)

    async def process_invitation_callback(self, access_token: str, refresh_token: str) -> AuthUser:
        """Establish the invited account's session and mark its users row as active."""
        try:
            user = await self.auth_client.get_user(access_token)
        except RemoteError as error:
            log_action(self.logger, MODULE, "invitation_callback", "error", trace_id=error.trace_id, level=logging.WARNING)
            raise
        self.auth_store.save(SessionData(access_token=access_token, refresh_token=refresh_token, user=user))

        status: bool | str = True if self.legacy_users_shape else UserStatus.ACTIVE.value
        try:
            await self.users_client.update_user(
                user.id,
                {"status": status, "updated_at": datetime.now(timezone.utc).isoformat()},
            )
        except RemoteError as error:
            log_action(self.logger, MODULE, "invitation_callback", "error", trace_id=error.trace_id, level=logging.WARNING)
            raise
        log_action(self.logger, MODULE, "invitation_callback", "success", actor=user.id)
        return user

    @staticmethod
    def get_callback_tokens_from_url(url: str) -> CallbackTokens | None:
        """Tokens arrive in the query string or, for implicit grants, in the fragment."""
        parts = urlsplit(url)
        for source in (parts.query, parts.fragment):
            params = parse_qs(source)
            access_token = (params.get("access_token") or [""])[0]
            refresh_token = (params.get("refresh_token") or [""])[0]
            if access_token and refresh_token:
                return CallbackTokens(access_token=access_token, refresh_token=refresh_token)
        return None
