from __future__ import annotations

from pathlib import Path

import httpx

from supa_admin.app.application.state.user_collection_state import UserCollectionState
from supa_admin.app.config import AppConfig
from supa_admin.app.infrastructure.sdk_adapter.auth_adapter import AuthService
from supa_admin.app.infrastructure.sdk_adapter.users_adapter import UsersGateway
from supa_admin.app.ui.components.confirm_dialog import Confirm, console_confirm
from supa_admin.app.ui.components.error_banner import ErrorBanner
from supa_admin.app.ui.views.auth_views import AuthCallbackController, SignInController, SignUpController
from supa_admin.app.ui.views.user_editor_view import UserEditorController
from supa_admin.app.ui.views.users_list_view import UsersListController
from supa_admin.clients.supabase_sdk.auth_store import AuthStore
from supa_admin.clients.supabase_sdk.http_client import HttpClient


class AdminBootstrap:
    """Builds the object graph once; every collaborator is passed in explicitly."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        session_dir: Path | None = None,
        confirm: Confirm | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        self.http = HttpClient(self.config.client, client=client)
        self.auth_store = AuthStore(base_dir=session_dir)
        self.auth = AuthService(
            self.http,
            self.auth_store,
            site_redirect_url=self.config.site_url,
            oauth_redirect_url=self.config.oauth_redirect_url,
            legacy_users_shape=self.config.legacy_users_shape,
        )
        self.http.register_auth_error_handler(self.auth.handle_auth_error)
        self.gateway = UsersGateway(
            self.http,
            self.auth_store,
            invitation_redirect_url=self.config.invitation_redirect_url,
            legacy_users_shape=self.config.legacy_users_shape,
        )
        self.collection = UserCollectionState(self.gateway)
        self.banner = ErrorBanner()
        self.confirm = confirm or console_confirm

    def users_list(self) -> UsersListController:
        return UsersListController(
            self.collection,
            confirm=self.confirm,
            banner=self.banner,
            page_limit=self.config.page_size,
        )

    def user_editor(self, user_id: str | None = None) -> UserEditorController:
        return UserEditorController(self.collection, user_id)

    def sign_in(self) -> SignInController:
        return SignInController(self.auth)

    def sign_up(self) -> SignUpController:
        return SignUpController(self.auth)

    def auth_callback(self) -> AuthCallbackController:
        return AuthCallbackController(self.auth)

    async def aclose(self) -> None:
        await self.http.aclose()
