"""Translate backend payloads into the application's records.

The users table has been seen in two shapes: ``name`` with a boolean ``status``
column, and ``full_name`` with a text ``status`` column. Both mappers probe the
fields that are actually present and never raise.
"""

from __future__ import annotations

from typing import Any, Mapping

from supa_admin.app.domain.models.user import KNOWN_ROLES, Profile, User, UserStatus

PROFILE_NAME_PLACEHOLDER = "Cargando..."
PROFILE_EMAIL_PLACEHOLDER = "cargando@ejemplo.com"


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        text = str(value)
        return text or None
    return None


def _timestamp(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _first_text(raw: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = _text(raw.get(key))
        if value:
            return value
    return None


def normalize_role(value: Any) -> str | None:
    role = _text(value)
    if role is None:
        return None
    normalized = role.strip().lower()
    return normalized if normalized in KNOWN_ROLES else None


def normalize_status(value: Any, legacy_is_active: Any = None) -> str | None:
    if isinstance(value, bool) or (isinstance(value, int) and value in (0, 1)):
        return UserStatus.ACTIVE.value if value else UserStatus.INACTIVE.value
    status = _text(value)
    if status and status.strip():
        return status.strip().lower()
    if isinstance(legacy_is_active, bool):
        return UserStatus.ACTIVE.value if legacy_is_active else UserStatus.INACTIVE.value
    return None


def map_record(raw: Any) -> User:
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    full_name = _first_text(record, "full_name", "name")
    return User(
        id=_text(record.get("id")) or "",
        name=full_name or "",
        email=_text(record.get("email")) or "",
        avatar=_first_text(record, "avatar_url", "avatar") or "",
        full_name=full_name,
        created_at=_timestamp(record.get("created_at")),
        last_sign_in_at=_timestamp(record.get("last_sign_in_at")),
        role=normalize_role(record.get("role")),
        status=normalize_status(record.get("status"), record.get("is_active")),
    )


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def map_profile(auth_user: Any) -> Profile:
    if hasattr(auth_user, "model_dump"):
        auth_user = auth_user.model_dump()
    record = _mapping(auth_user)
    user_metadata = _mapping(record.get("user_metadata"))
    app_metadata = _mapping(record.get("app_metadata"))
    user_id = _text(record.get("id")) or ""
    return Profile(
        id=user_id,
        name=_text(user_metadata.get("name")) or PROFILE_NAME_PLACEHOLDER,
        email=_text(record.get("email")) or PROFILE_EMAIL_PLACEHOLDER,
        avatar=_text(user_metadata.get("avatar_url")) or f"https://picsum.photos/40/40?random={user_id[:4]}",
        full_name=_text(user_metadata.get("full_name")),
        created_at=_timestamp(record.get("created_at")) or "",
        last_sign_in_at=_timestamp(record.get("last_sign_in_at")) or "",
        provider=_text(app_metadata.get("provider")) or "",
    )
