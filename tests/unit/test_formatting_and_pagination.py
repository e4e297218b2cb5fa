from datetime import datetime, timedelta, timezone

import pytest

from supa_admin.app.ui.formatting import (
    format_date,
    format_date_time,
    format_relative_time,
    role_badge_class,
    role_label,
    status_label,
)
from supa_admin.app.ui.pagination import PaginationState, goto_page, next_page, page_window, prev_page, resize
from supa_admin.app.ui.table_printer import USER_COLUMNS, render_table, user_row
from supa_admin.app.domain.models.user import User

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def test_labels_and_badges() -> None:
    assert role_label("moderator") == "Moderador"
    assert role_label(None) == "Sin rol"
    assert status_label("inactive") == "Inactivo"
    assert role_badge_class("admin") == "badge-primary"
    assert role_badge_class("other") == "badge-ghost"


def test_format_date_and_time() -> None:
    assert format_date("2024-05-01T10:30:00Z", tz=timezone.utc) == "01/05/2024"
    assert format_date_time("2024-05-01T10:30:00Z", tz=timezone.utc) == "01/05/2024, 10:30"
    assert format_date("nope") == "-"
    assert format_date_time(None) == "-"


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(seconds=30), "Ahora mismo"),
        (timedelta(minutes=1), "Hace 1 minuto"),
        (timedelta(minutes=45), "Hace 45 minutos"),
        (timedelta(hours=3), "Hace 3 horas"),
        (timedelta(days=1), "Hace 1 día"),
        (timedelta(days=12), "Hace 12 días"),
        (timedelta(days=45), "05/04/2024"),
    ],
)
def test_format_relative_time(delta, expected) -> None:
    assert format_relative_time(NOW - delta, now=NOW, tz=timezone.utc) == expected


def test_format_relative_time_never() -> None:
    assert format_relative_time(None, now=NOW) == "Nunca"
    assert format_relative_time("garbage", now=NOW) == "Nunca"


def test_pagination_state_transitions() -> None:
    state = PaginationState()

    next_page(state, has_next=True)
    assert state.page == 2
    next_page(state, has_next=False)
    assert state.page == 2
    prev_page(state)
    prev_page(state)
    assert state.page == 1
    goto_page(state, -4)
    assert state.page == 1
    goto_page(state, 3)
    resize(state, 25)
    assert (state.page, state.page_size) == (1, 25)
    with pytest.raises(ValueError):
        resize(state, 0)


@pytest.mark.parametrize(
    "current,total,expected",
    [
        (1, 0, []),
        (1, 3, [1, 2, 3]),
        (1, 10, [1, 2, 3, 4, 5]),
        (6, 10, [4, 5, 6, 7, 8]),
        (10, 10, [6, 7, 8, 9, 10]),
    ],
)
def test_page_window(current, total, expected) -> None:
    assert page_window(current, total) == expected


def test_render_users_table() -> None:
    user = User(id="u1", name="Ana", email="ana@demo.com", role="admin", status="active")

    lines = render_table([user_row(user, selected=True)], USER_COLUMNS)

    assert lines[0].startswith("    | ID")
    assert "[x] | u1" in lines[2]
    assert "Administrador" in lines[2]
    assert "Nunca" in lines[2]
    assert render_table([], USER_COLUMNS) == ["(sin resultados)"]
