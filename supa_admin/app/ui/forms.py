from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from supa_admin.app.domain.models.user import KNOWN_ROLES

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,4}$")
NAME_MIN_LENGTH = 2
PASSWORD_MIN_LENGTH = 6

FIELD_LABELS = {"name": "Nombre", "email": "Email", "role": "Rol", "password": "Contraseña"}


class FormStatus(str, Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    VALID = "valid"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def first_invalid_field(self) -> str | None:
        return next(iter(self.field_errors), None)

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


@dataclass
class FormState:
    status: FormStatus = FormStatus.IDLE
    submit_enabled: bool = False
    submit_disabled_reason: str = "Completa los campos requeridos."


def _normalize_required_text(value: str | None) -> str:
    return (value or "").strip()


def _required(field: str) -> str:
    return f"{FIELD_LABELS.get(field, field)} es requerido"


def _min_length(field: str, length: int) -> str:
    return f"{FIELD_LABELS.get(field, field)} debe tener al menos {length} caracteres"


def _validate_email(email: str, field_errors: dict[str, str]) -> None:
    if not email:
        field_errors["email"] = _required("email")
    elif not EMAIL_REGEX.match(email):
        field_errors["email"] = "Ingresa un email válido"


def validate_user_form(name: str | None, email: str | None, role: str | None) -> FormResult:
    normalized_name = _normalize_required_text(name)
    normalized_email = _normalize_required_text(email).lower()
    normalized_role = _normalize_required_text(role).lower()

    field_errors: dict[str, str] = {}
    if not normalized_name:
        field_errors["name"] = _required("name")
    elif len(normalized_name) < NAME_MIN_LENGTH:
        field_errors["name"] = _min_length("name", NAME_MIN_LENGTH)

    _validate_email(normalized_email, field_errors)

    if not normalized_role:
        field_errors["role"] = _required("role")
    elif normalized_role not in KNOWN_ROLES:
        field_errors["role"] = "Rol no válido. Usa admin, moderator o user."

    return FormResult(
        values={"name": normalized_name, "email": normalized_email, "role": normalized_role},
        field_errors=field_errors,
    )


def validate_credentials_form(email: str | None, password: str | None) -> FormResult:
    """Shared by sign-in and sign-up."""
    normalized_email = _normalize_required_text(email).lower()
    raw_password = password or ""

    field_errors: dict[str, str] = {}
    _validate_email(normalized_email, field_errors)
    if not raw_password:
        field_errors["password"] = _required("password")
    elif len(raw_password) < PASSWORD_MIN_LENGTH:
        field_errors["password"] = _min_length("password", PASSWORD_MIN_LENGTH)

    return FormResult(values={"email": normalized_email, "password": raw_password}, field_errors=field_errors)


def build_form_state(result: FormResult) -> FormState:
    if result.is_valid:
        return FormState(status=FormStatus.VALID, submit_enabled=True, submit_disabled_reason="")

    first_invalid_field = result.first_invalid_field or "formulario"
    return FormState(
        status=FormStatus.DIRTY,
        submit_enabled=False,
        submit_disabled_reason=f"Corrige '{first_invalid_field}' antes de enviar.",
    )
