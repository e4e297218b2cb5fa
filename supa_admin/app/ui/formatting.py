from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from supa_admin.app.domain.policies.user_projection import parse_timestamp

ROLE_LABELS = {"admin": "Administrador", "moderator": "Moderador", "user": "Usuario"}
STATUS_LABELS = {"active": "Activo", "inactive": "Inactivo", "suspended": "Suspendido"}
ROLE_BADGES = {"admin": "badge-primary", "moderator": "badge-secondary", "user": "badge-neutral"}
STATUS_BADGES = {"active": "badge-success", "inactive": "badge-warning", "suspended": "badge-error"}
DEFAULT_BADGE = "badge-ghost"


def role_label(role: str | None) -> str:
    return ROLE_LABELS.get(role or "", "Sin rol")


def status_label(status: str | None) -> str:
    return STATUS_LABELS.get(status or "", "Desconocido")


def role_badge_class(role: str | None) -> str:
    return ROLE_BADGES.get(role or "", DEFAULT_BADGE)


def status_badge_class(status: str | None) -> str:
    return STATUS_BADGES.get(status or "", DEFAULT_BADGE)


def _coerce(value: datetime | str | None, tz: tzinfo | None) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.astimezone(tz)


def format_date(value: datetime | str | None, *, tz: tzinfo | None = None) -> str:
    parsed = _coerce(value, tz)
    return parsed.strftime("%d/%m/%Y") if parsed else "-"


def format_date_time(value: datetime | str | None, *, tz: tzinfo | None = None) -> str:
    parsed = _coerce(value, tz)
    return parsed.strftime("%d/%m/%Y, %H:%M") if parsed else "-"


def _plural(count: int, unit: str) -> str:
    return f"Hace {count} {unit}{'s' if count > 1 else ''}"


def format_relative_time(
    value: datetime | str | None,
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> str:
    parsed = _coerce(value, tz)
    if parsed is None:
        return "Nunca"
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    elapsed = (current - parsed).total_seconds()
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)
    if minutes < 1:
        return "Ahora mismo"
    if minutes < 60:
        return _plural(minutes, "minuto")
    if hours < 24:
        return _plural(hours, "hora")
    if days < 30:
        return _plural(days, "día")
    return format_date(parsed, tz=tz)
