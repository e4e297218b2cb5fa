import asyncio

import pytest

from supa_admin.app.application.errors import FormValidationError
from supa_admin.app.application.state.user_collection_state import UserCollectionState
from supa_admin.app.domain.models.user import Profile
from supa_admin.app.infrastructure.sdk_adapter.auth_adapter import AuthService
from supa_admin.app.ui.forms import FormStatus
from supa_admin.app.ui.views.auth_views import AuthCallbackController, SignInController, SignUpController
from supa_admin.app.ui.views.user_editor_view import UserEditorController
from supa_admin.clients.supabase_sdk.errors import AuthError, RemoteError
from supa_admin.clients.supabase_sdk.models import OAuthRedirect, SignUpResponse


class FakeAuth:
    def __init__(self, *, fail: RemoteError | None = None, session: bool = True) -> None:
        self.fail = fail
        self.session = session
        self.callbacks: list[tuple[str, str]] = []

    async def sign_in(self, email: str, password: str) -> Profile:
        if self.fail:
            raise self.fail
        return Profile(id="u1", name="Ana", email=email, avatar="")

    async def sign_up(self, email: str, password: str) -> SignUpResponse:
        if self.fail:
            raise self.fail
        return SignUpResponse(id="u2", email=email, access_token="at" if self.session else None)

    def sign_in_with_oauth(self, provider: str = "google") -> OAuthRedirect:
        return OAuthRedirect(provider=provider, url=f"https://demo.supabase.co/auth/v1/authorize?provider={provider}")

    async def process_invitation_callback(self, access_token: str, refresh_token: str) -> None:
        if self.fail:
            raise self.fail
        self.callbacks.append((access_token, refresh_token))

    get_callback_tokens_from_url = staticmethod(AuthService.get_callback_tokens_from_url)


def _loaded(gateway) -> UserCollectionState:
    collection = UserCollectionState(gateway)
    asyncio.run(collection.load())
    return collection


def test_create_mode_defaults(gateway) -> None:
    editor = UserEditorController(UserCollectionState(gateway))

    asyncio.run(editor.on_init())

    assert editor.is_edit_mode is False
    assert editor.page_title == "Crear Usuario"
    assert editor.values == {"name": "", "email": "", "role": "user"}
    assert gateway.calls == []


def test_create_submit_appends_user(gateway) -> None:
    collection = _loaded(gateway)
    editor = UserEditorController(collection)
    editor.set_field("name", " Nueva Persona ")
    editor.set_field("email", "Nueva@Demo.com")
    editor.set_field("role", "moderator")

    saved = asyncio.run(editor.on_submit())

    assert saved.email == "nueva@demo.com"
    assert saved.status == "inactive"
    assert editor.submit_success is True
    assert editor.form_state.status == FormStatus.SUCCESS
    assert collection.all_users[-1].id == saved.id


def test_invalid_submit_never_calls_backend(gateway) -> None:
    editor = UserEditorController(UserCollectionState(gateway))
    editor.set_field("email", "bad")

    with pytest.raises(FormValidationError) as exc_info:
        asyncio.run(editor.on_submit())

    assert set(exc_info.value.field_errors) == {"name", "email"}
    assert not any(call[0] == "create" for call in gateway.calls)


def test_edit_mode_loads_and_updates(gateway) -> None:
    collection = _loaded(gateway)
    editor = UserEditorController(collection, "u3")

    asyncio.run(editor.on_init())
    assert editor.page_title == "Editar Usuario"
    assert editor.values == {"name": "User 3", "email": "user3@demo.com", "role": "user"}

    editor.set_field("role", "admin")
    saved = asyncio.run(editor.on_submit())

    assert saved.role == "admin"
    assert collection.get_user_from_state("u3").role == "admin"


def test_edit_mode_load_failure(gateway) -> None:
    gateway.fail("get", "u3")
    editor = UserEditorController(UserCollectionState(gateway), "u3")

    asyncio.run(editor.on_init())

    assert editor.submit_error == "Error cargando los datos del usuario"
    assert editor.is_loading is False


def test_submit_failure_keeps_form_and_reraises(gateway) -> None:
    collection = _loaded(gateway)
    editor = UserEditorController(collection, "u2")
    asyncio.run(editor.on_init())
    gateway.fail("update", "u2", message="duplicate key value")
    editor.set_field("name", "Otro Nombre")

    with pytest.raises(RemoteError):
        asyncio.run(editor.on_submit())

    assert editor.submit_error == "duplicate key value"
    assert editor.form_state.status == FormStatus.ERROR
    assert editor.values["name"] == "Otro Nombre"
    assert collection.get_user_from_state("u2").name == "User 2"


def test_reset_restores_loaded_values(gateway) -> None:
    editor = UserEditorController(_loaded(gateway), "u1")
    asyncio.run(editor.on_init())
    editor.set_field("name", "Cambiado")

    editor.on_reset()

    assert editor.values["name"] == "User 1"
    assert editor.form_state.status == FormStatus.IDLE


def test_sign_in_controller() -> None:
    controller = SignInController(FakeAuth())

    assert asyncio.run(controller.on_submit("ana@demo", "1")) is None
    assert set(controller.field_errors) == {"email", "password"}

    assert asyncio.run(controller.on_submit("ana@demo.com", "secret1")) == "/dashboard"
    assert controller.message.message == "Bienvenido, Ana"


def test_sign_in_controller_shows_backend_message() -> None:
    failing = FakeAuth(fail=AuthError(code="invalid_grant", message="Invalid login credentials", status_code=400))
    controller = SignInController(failing)

    assert asyncio.run(controller.on_submit("ana@demo.com", "secret1")) is None
    assert controller.message.ok is False
    assert controller.message.message == "Invalid login credentials"
    assert controller.is_submitting is False
    assert controller.sign_in_with_google().endswith("provider=google")


def test_sign_up_controller_with_and_without_session() -> None:
    assert asyncio.run(SignUpController(FakeAuth(session=True)).on_submit("a@demo.com", "secret1")) == "/dashboard"

    pending = SignUpController(FakeAuth(session=False))
    assert asyncio.run(pending.on_submit("a@demo.com", "secret1")) is None
    assert "Revisa tu correo" in pending.message.message


def test_auth_callback_controller() -> None:
    auth = FakeAuth()
    controller = AuthCallbackController(auth)

    assert asyncio.run(controller.process("http://x/auth/callback")) is None
    assert controller.has_error
    assert controller.error_message == "No se encontraron tokens de autenticación en la URL"

    route = asyncio.run(controller.process("http://x/auth/callback#access_token=a&refresh_token=r"))
    assert route == "/dashboard"
    assert controller.has_error is False
    assert auth.callbacks == [("a", "r")]


def test_auth_callback_controller_backend_failure() -> None:
    auth = FakeAuth(fail=AuthError(code="HTTP_ERROR", message="Token has expired", status_code=401))
    controller = AuthCallbackController(auth)

    assert asyncio.run(controller.process("http://x/cb?access_token=a&refresh_token=r")) is None
    assert controller.error_message == "Token has expired"
    assert controller.is_processing is False
