import asyncio
import json

import httpx
import pytest

from supa_admin.app.domain.models.user import UserChanges, UserInput
from supa_admin.app.infrastructure.sdk_adapter.users_adapter import UsersGateway
from supa_admin.clients.supabase_sdk.auth_store import AuthStore
from supa_admin.clients.supabase_sdk.errors import ConflictError
from supa_admin.clients.supabase_sdk.http_client import HttpClient
from supa_admin.clients.supabase_sdk.models import SessionData


class RecordingBackend:
    """Answers the invite and table endpoints, echoing written rows back."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/auth/v1/invite":
            return httpx.Response(200, json={"id": "invited-1", "email": "new@demo.com"})
        if request.method in {"POST", "PATCH"}:
            return httpx.Response(201, json=[json.loads(request.content)])
        return httpx.Response(200, json=[])

    def bodies(self, method: str) -> list[dict]:
        return [json.loads(item.content) for item in self.requests if item.method == method and item.content]


def _gateway(client_config, tmp_path, handler, *, legacy: bool = False) -> UsersGateway:
    http = HttpClient(
        client_config,
        client=httpx.AsyncClient(base_url=client_config.base_url, transport=httpx.MockTransport(handler)),
    )
    store = AuthStore(base_dir=tmp_path)
    store.save(SessionData(access_token="admin-token"))
    return UsersGateway(
        http,
        store,
        invitation_redirect_url="http://localhost:4200/auth/callback",
        legacy_users_shape=legacy,
    )


def test_create_invites_then_inserts_inactive_row(client_config, tmp_path) -> None:
    backend = RecordingBackend()
    gateway = _gateway(client_config, tmp_path, backend)

    row = asyncio.run(gateway.create_user(UserInput(email="new@demo.com", name="Nuevo", role="moderator")))

    invite, insert = backend.requests
    assert invite.url.params["redirect_to"] == "http://localhost:4200/auth/callback"
    assert json.loads(invite.content)["data"] == {"full_name": "Nuevo", "role": "moderator"}
    assert insert.headers["Authorization"] == "Bearer admin-token"
    assert row["id"] == "invited-1"
    assert row["full_name"] == "Nuevo"
    assert row["status"] == "inactive"
    assert row["last_sign_in_at"] is None
    assert "name" not in row


def test_create_with_boolean_status_column(client_config, tmp_path) -> None:
    backend = RecordingBackend()
    gateway = _gateway(client_config, tmp_path, backend, legacy=True)

    row = asyncio.run(gateway.create_user(UserInput(email="new@demo.com", name="Nuevo")))

    assert row["name"] == "Nuevo"
    assert row["status"] is False
    assert row["role"] == "user"


def test_create_stops_when_insert_conflicts(client_config, tmp_path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/auth/v1/invite":
            return httpx.Response(200, json={"id": "invited-1"})
        return httpx.Response(409, json={"code": "23505", "message": "duplicate key value"})

    gateway = _gateway(client_config, tmp_path, handler)

    with pytest.raises(ConflictError):
        asyncio.run(gateway.create_user(UserInput(email="dup@demo.com", name="Dup")))


def test_update_sends_only_provided_fields(client_config, tmp_path) -> None:
    backend = RecordingBackend()
    gateway = _gateway(client_config, tmp_path, backend)

    asyncio.run(gateway.update_user("u1", UserChanges(role="admin")))

    (body,) = backend.bodies("PATCH")
    assert set(body) == {"role", "updated_at"}
    assert backend.requests[0].url.params["id"] == "eq.u1"


@pytest.mark.parametrize("legacy,active,expected", [(False, True, "active"), (False, False, "inactive"), (True, False, False)])
def test_set_user_status_encoding(client_config, tmp_path, legacy, active, expected) -> None:
    backend = RecordingBackend()
    gateway = _gateway(client_config, tmp_path, backend, legacy=legacy)

    asyncio.run(gateway.set_user_status("u1", active))

    (body,) = backend.bodies("PATCH")
    assert body["status"] == expected


def test_delete_user(client_config, tmp_path) -> None:
    backend = RecordingBackend()
    gateway = _gateway(client_config, tmp_path, backend)

    assert asyncio.run(gateway.delete_user("u4")) is None
    assert backend.requests[0].method == "DELETE"
    assert backend.requests[0].url.params["id"] == "eq.u4"
