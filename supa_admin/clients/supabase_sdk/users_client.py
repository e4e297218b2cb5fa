from __future__ import annotations

from collections.abc import Callable
from typing import Any

from supa_admin.clients.supabase_sdk.errors import NotFoundError
from supa_admin.clients.supabase_sdk.http_client import HttpClient

USER_COLUMNS = "*"
RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class UsersClient:
    """Row access to the users table through the PostgREST API."""

    def __init__(self, http_client: HttpClient, token_provider: Callable[[], str | None] | None = None) -> None:
        self.http_client = http_client
        self.token_provider = token_provider or (lambda: None)
        config = http_client.config
        self._path = f"{config.rest_prefix}/{config.users_table}"

    async def list_users(self, *, columns: str = USER_COLUMNS) -> list[dict[str, Any]]:
        payload = await self.http_client.request(
            "GET",
            self._path,
            token=self.token_provider(),
            params={"select": columns, "order": "created_at.desc"},
        )
        return _rows(payload)

    async def get_user(self, user_id: str) -> dict[str, Any]:
        payload = await self.http_client.request(
            "GET",
            self._path,
            token=self.token_provider(),
            params={"select": "*", "id": f"eq.{user_id}", "limit": 1},
        )
        return _single(payload, user_id)

    async def insert_user(self, row: dict[str, Any]) -> dict[str, Any]:
        payload = await self.http_client.request(
            "POST",
            self._path,
            token=self.token_provider(),
            params={"select": "*"},
            json_body=row,
            headers=RETURN_REPRESENTATION,
        )
        return _single(payload, str(row.get("id") or ""))

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        payload = await self.http_client.request(
            "PATCH",
            self._path,
            token=self.token_provider(),
            params={"select": "*", "id": f"eq.{user_id}"},
            json_body=changes,
            headers=RETURN_REPRESENTATION,
        )
        return _single(payload, user_id)

    async def delete_user(self, user_id: str) -> None:
        await self.http_client.request(
            "DELETE",
            self._path,
            token=self.token_provider(),
            params={"id": f"eq.{user_id}"},
        )


def _rows(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    if isinstance(payload, dict):
        return [payload]
    return []


def _single(payload: Any, user_id: str) -> dict[str, Any]:
    rows = _rows(payload)
    if not rows:
        raise NotFoundError(
            code="USER_NOT_FOUND",
            message=f"Usuario {user_id} no encontrado",
            status_code=404,
        )
    return rows[0]
