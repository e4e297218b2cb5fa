from __future__ import annotations

from dataclasses import dataclass

from supa_admin.app.infrastructure.sdk_adapter.auth_adapter import AuthService
from supa_admin.app.ui.forms import FormResult, build_form_state, validate_credentials_form
from supa_admin.clients.supabase_sdk.errors import RemoteError

DASHBOARD_ROUTE = "/dashboard"
SIGN_IN_ROUTE = "/auth/sign-in"


@dataclass
class AuthMessage:
    ok: bool
    message: str


class _CredentialsController:
    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service
        self.field_errors: dict[str, str] = {}
        self.message: AuthMessage | None = None
        self.is_submitting = False

    def _validate(self, email: str | None, password: str | None) -> FormResult | None:
        result = validate_credentials_form(email, password)
        self.field_errors = result.field_errors
        if not result.is_valid:
            self.message = AuthMessage(ok=False, message=build_form_state(result).submit_disabled_reason)
            return None
        return result

    def sign_in_with_google(self) -> str:
        return self.auth_service.sign_in_with_oauth("google").url


class SignInController(_CredentialsController):
    async def on_submit(self, email: str | None, password: str | None) -> str | None:
        """Returns the route to navigate to, or None when the user stays on the page."""
        result = self._validate(email, password)
        if result is None:
            return None
        self.is_submitting = True
        try:
            profile = await self.auth_service.sign_in(result.values["email"], result.values["password"])
        except RemoteError as error:
            self.message = AuthMessage(ok=False, message=error.message)
            return None
        finally:
            self.is_submitting = False
        self.message = AuthMessage(ok=True, message=f"Bienvenido, {profile.name}")
        return DASHBOARD_ROUTE


class SignUpController(_CredentialsController):
    async def on_submit(self, email: str | None, password: str | None) -> str | None:
        result = self._validate(email, password)
        if result is None:
            return None
        self.is_submitting = True
        try:
            response = await self.auth_service.sign_up(result.values["email"], result.values["password"])
        except RemoteError as error:
            self.message = AuthMessage(ok=False, message=error.message)
            return None
        finally:
            self.is_submitting = False
        if response.has_session:
            self.message = AuthMessage(ok=True, message="Usuario creado exitosamente")
            return DASHBOARD_ROUTE
        self.message = AuthMessage(ok=True, message="Usuario creado. Revisa tu correo para confirmar la cuenta.")
        return None


class AuthCallbackController:
    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service
        self.is_processing = False
        self.has_error = False
        self.error_message = ""

    async def process(self, url: str) -> str | None:
        self.is_processing = True
        self.has_error = False
        self.error_message = ""
        tokens = self.auth_service.get_callback_tokens_from_url(url)
        if tokens is None:
            self._fail("No se encontraron tokens de autenticación en la URL")
            return None
        try:
            await self.auth_service.process_invitation_callback(tokens.access_token, tokens.refresh_token)
        except RemoteError as error:
            self._fail(error.message or "Error procesando la invitación")
            return None
        self.is_processing = False
        return DASHBOARD_ROUTE

    def _fail(self, message: str) -> None:
        self.has_error = True
        self.is_processing = False
        self.error_message = message
