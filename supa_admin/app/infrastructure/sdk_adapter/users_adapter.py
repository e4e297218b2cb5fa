from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from supa_admin.app.domain.models.user import UserChanges, UserInput, UserStatus
from supa_admin.clients.supabase_sdk.auth_client import AuthClient
from supa_admin.clients.supabase_sdk.auth_store import AuthStore
from supa_admin.clients.supabase_sdk.http_client import HttpClient
from supa_admin.clients.supabase_sdk.users_client import UsersClient


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UsersGateway:
    """Remote operations on the users table.

    Returns raw rows; mapping into ``User`` records happens in the collection state.
    """

    def __init__(
        self,
        http: HttpClient,
        auth_store: AuthStore,
        *,
        invitation_redirect_url: str | None = None,
        legacy_users_shape: bool = False,
    ) -> None:
        self.auth_store = auth_store
        self.users = UsersClient(http, token_provider=self._access_token)
        self.auth = AuthClient(http)
        self.invitation_redirect_url = invitation_redirect_url
        self.legacy_users_shape = legacy_users_shape

    def _access_token(self) -> str | None:
        session = self.auth_store.load()
        return session.access_token if session else None

    @property
    def _name_column(self) -> str:
        return "name" if self.legacy_users_shape else "full_name"

    def _status_value(self, active: bool) -> bool | str:
        if self.legacy_users_shape:
            return active
        return UserStatus.ACTIVE.value if active else UserStatus.INACTIVE.value

    async def list_users(self) -> list[dict[str, Any]]:
        return await self.users.list_users()

    async def get_user(self, user_id: str) -> dict[str, Any]:
        return await self.users.get_user(user_id)

    async def create_user(self, data: UserInput) -> dict[str, Any]:
        """Invite the identity first, then insert its row as inactive until the invitation is accepted."""
        invited = await self.auth.invite_user_by_email(
            data.email,
            data={"full_name": data.name, "role": data.role},
            redirect_to=self.invitation_redirect_url,
        )
        now = _now_iso()
        row = {
            "id": invited.id,
            "email": data.email,
            self._name_column: data.name,
            "role": data.role,
            "status": self._status_value(False),
            "created_at": invited.created_at or now,
            "updated_at": now,
            "last_sign_in_at": None,
        }
        return await self.users.insert_user(row)

    async def update_user(self, user_id: str, changes: UserChanges) -> dict[str, Any]:
        payload: dict[str, Any] = {"updated_at": _now_iso()}
        if changes.name is not None:
            payload[self._name_column] = changes.name
        if changes.email is not None:
            payload["email"] = changes.email
        if changes.role is not None:
            payload["role"] = changes.role
        return await self.users.update_user(user_id, payload)

    async def delete_user(self, user_id: str) -> None:
        await self.users.delete_user(user_id)

    async def set_user_status(self, user_id: str, active: bool) -> dict[str, Any]:
        return await self.users.update_user(
            user_id,
            {"status": self._status_value(active), "updated_at": _now_iso()},
        )
