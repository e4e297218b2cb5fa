from __future__ import annotations

from supa_admin.app.application.errors import FormValidationError
from supa_admin.app.application.state.user_collection_state import UserCollectionState
from supa_admin.app.domain.models.user import User, UserChanges, UserInput, UserRole
from supa_admin.app.ui.forms import FormState, FormStatus, build_form_state, validate_user_form
from supa_admin.clients.supabase_sdk.errors import RemoteError

BLANK_FORM = {"name": "", "email": "", "role": UserRole.USER.value}


class UserEditorController:
    """Create or edit one user. Edit mode when constructed with a ``user_id``."""

    def __init__(self, collection: UserCollectionState, user_id: str | None = None) -> None:
        self.collection = collection
        self.user_id = user_id
        self.current_user: User | None = None
        self.values: dict[str, str] = dict(BLANK_FORM)
        self.field_errors: dict[str, str] = {}
        self.form_state = FormState()
        self.is_loading = False
        self.submit_error: str | None = None
        self.submit_success = False

    @property
    def is_edit_mode(self) -> bool:
        return self.user_id is not None

    @property
    def page_title(self) -> str:
        return "Editar Usuario" if self.is_edit_mode else "Crear Usuario"

    @property
    def submit_button_text(self) -> str:
        return "Actualizar Usuario" if self.is_edit_mode else "Crear Usuario"

    async def on_init(self) -> None:
        if not self.is_edit_mode:
            return
        self.is_loading = True
        self.submit_error = None
        try:
            self.current_user = await self.collection.get_user(self.user_id)
        except RemoteError:
            self.submit_error = "Error cargando los datos del usuario"
            return
        finally:
            self.is_loading = False
        self._populate(self.current_user)

    def _populate(self, user: User) -> None:
        self.values = {"name": user.name, "email": user.email, "role": user.role or UserRole.USER.value}

    def set_field(self, field: str, value: str) -> None:
        if field not in BLANK_FORM:
            raise KeyError(field)
        self.values[field] = value
        self.form_state = FormState(status=FormStatus.DIRTY)

    def validate(self) -> bool:
        result = validate_user_form(self.values.get("name"), self.values.get("email"), self.values.get("role"))
        self.field_errors = result.field_errors
        self.form_state = build_form_state(result)
        if result.is_valid:
            self.values = result.values
        return result.is_valid

    async def on_submit(self) -> User:
        if not self.validate():
            raise FormValidationError(field_errors=dict(self.field_errors))

        self.form_state = FormState(status=FormStatus.SUBMITTING)
        self.submit_error = None
        self.submit_success = False
        try:
            if self.is_edit_mode:
                saved = await self.collection.update(
                    self.user_id,
                    UserChanges(name=self.values["name"], email=self.values["email"], role=self.values["role"]),
                )
            else:
                saved = await self.collection.create(
                    UserInput(email=self.values["email"], name=self.values["name"], role=self.values["role"])
                )
        except RemoteError as error:
            fallback = "Error actualizando el usuario" if self.is_edit_mode else "Error creando el usuario"
            self.submit_error = error.message or fallback
            self.form_state = FormState(status=FormStatus.ERROR, submit_enabled=True, submit_disabled_reason="")
            raise
        self.submit_success = True
        self.form_state = FormState(status=FormStatus.SUCCESS)
        if self.is_edit_mode:
            self.current_user = saved
        return saved

    def on_reset(self) -> None:
        if self.is_edit_mode and self.current_user is not None:
            self._populate(self.current_user)
        else:
            self.values = dict(BLANK_FORM)
        self.field_errors = {}
        self.form_state = FormState()
        self.submit_error = None
        self.submit_success = False
