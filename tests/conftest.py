from __future__ import annotations

from datetime import datetime, timezone

import pytest

from supa_admin.app.domain.models.user import UserChanges, UserInput
from supa_admin.clients.supabase_sdk.config import ClientConfig
from supa_admin.clients.supabase_sdk.errors import NotFoundError, RemoteError, ServerError


def make_row(index: int, **overrides) -> dict:
    row = {
        "id": f"u{index}",
        "email": f"user{index}@demo.com",
        "full_name": f"User {index}",
        "role": "user",
        "status": "active",
        "created_at": "2024-01-10T10:00:00Z",
        "last_sign_in_at": None,
    }
    row.update(overrides)
    return row


class FakeGateway:
    """In-memory users table with per-call failure injection."""

    def __init__(self, rows: list[dict] | None = None) -> None:
        self.rows = [dict(row) for row in rows or []]
        self.failures: dict[tuple[str, str | None], RemoteError] = {}
        self.calls: list[tuple] = []
        self._created = 0

    def fail(self, operation: str, user_id: str | None = None, message: str = "boom") -> None:
        self.failures[(operation, user_id)] = ServerError(code="HTTP_ERROR", message=message, status_code=500)

    def _check(self, operation: str, user_id: str | None = None) -> None:
        error = self.failures.get((operation, user_id)) or self.failures.get((operation, None))
        if error is not None:
            raise error

    def _find(self, user_id: str) -> dict:
        row = next((row for row in self.rows if row["id"] == user_id), None)
        if row is None:
            raise NotFoundError(code="USER_NOT_FOUND", message=f"Usuario {user_id} no encontrado", status_code=404)
        return row

    async def list_users(self) -> list[dict]:
        self.calls.append(("list",))
        self._check("list")
        return [dict(row) for row in self.rows]

    async def get_user(self, user_id: str) -> dict:
        self.calls.append(("get", user_id))
        self._check("get", user_id)
        return dict(self._find(user_id))

    async def create_user(self, data: UserInput) -> dict:
        self.calls.append(("create", data.email))
        self._check("create")
        self._created += 1
        row = {
            "id": f"new-{self._created}",
            "email": data.email,
            "full_name": data.name,
            "role": data.role,
            "status": "inactive",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.rows.append(row)
        return dict(row)

    async def update_user(self, user_id: str, changes: UserChanges) -> dict:
        self.calls.append(("update", user_id))
        self._check("update", user_id)
        row = self._find(user_id)
        if changes.name is not None:
            row["full_name"] = changes.name
        if changes.email is not None:
            row["email"] = changes.email
        if changes.role is not None:
            row["role"] = changes.role
        return dict(row)

    async def delete_user(self, user_id: str) -> None:
        self.calls.append(("delete", user_id))
        self._check("delete", user_id)
        self.rows = [row for row in self.rows if row["id"] != user_id]

    async def set_user_status(self, user_id: str, active: bool) -> dict:
        self.calls.append(("set_status", user_id, active))
        self._check("set_status", user_id)
        row = self._find(user_id)
        # the boolean column shape echoes booleans back
        row["status"] = active
        return dict(row)


@pytest.fixture
def rows() -> list[dict]:
    return [make_row(index) for index in range(1, 13)]


@pytest.fixture
def gateway(rows) -> FakeGateway:
    return FakeGateway(rows)


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        base_url="https://demo.supabase.co",
        anon_key="anon-key",
        service_role_key="service-key",
    )


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def gateway_factory():
    return FakeGateway
