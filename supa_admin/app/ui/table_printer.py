from __future__ import annotations

from collections.abc import Iterable, Sequence

from supa_admin.app.domain.models.user import User
from supa_admin.app.ui.formatting import format_date, format_relative_time, role_label, status_label

EMPTY_VALUE = "-"

USER_COLUMNS: list[tuple[str, str]] = [
    ("selected", " "),
    ("id", "ID"),
    ("name", "Nombre"),
    ("email", "Email"),
    ("role", "Rol"),
    ("status", "Estado"),
    ("created_at", "Creado"),
    ("last_sign_in_at", "Último acceso"),
]


def user_row(user: User, selected: bool = False) -> dict[str, str]:
    return {
        "selected": "[x]" if selected else "[ ]",
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": role_label(user.role),
        "status": status_label(user.status),
        "created_at": format_date(user.created_at),
        "last_sign_in_at": format_relative_time(user.last_sign_in_at),
    }


def render_table(rows: Sequence[dict[str, str]], columns: Sequence[tuple[str, str]]) -> list[str]:
    if not rows:
        return ["(sin resultados)"]

    widths = [
        max(len(header), *(len(row.get(key) or EMPTY_VALUE) for row in rows))
        for key, header in columns
    ]
    lines = [
        " | ".join(header.ljust(width) for (_, header), width in zip(columns, widths)),
        "-+-".join("-" * width for width in widths),
    ]
    for row in rows:
        lines.append(" | ".join((row.get(key) or EMPTY_VALUE).ljust(width) for (key, _), width in zip(columns, widths)))
    return lines


def print_users_table(title: str, users: Iterable[User], selected_ids: Iterable[str] = ()) -> None:
    selected = set(selected_ids)
    print(f"\n{title}")
    for line in render_table([user_row(user, user.id in selected) for user in users], USER_COLUMNS):
        print(line)
