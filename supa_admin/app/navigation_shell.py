from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urlsplit

AUTH_ROOT = "/auth"
SIGN_IN_ROUTE = "/auth/sign-in"
DASHBOARD_ROUTE = "/dashboard"
USERS_ROUTE = "/dashboard/users"
MAX_REDIRECTS = 5


class SessionSource(Protocol):
    async def current_session(self): ...


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    redirect_to: str | None = None


@dataclass(frozen=True)
class NavRoute:
    key: str
    path: str
    label: str


@dataclass(frozen=True)
class RouteResolution:
    path: str
    view: str
    params: dict[str, str] = field(default_factory=dict)


AUTH_ROUTES: list[NavRoute] = [
    NavRoute("sign_in", "sign-in", "Iniciar sesión"),
    NavRoute("sign_up", "sign-up", "Crear cuenta"),
    NavRoute("auth_callback", "callback", "Aceptar invitación"),
]

DASHBOARD_ROUTES: list[NavRoute] = [
    NavRoute("dashboard", "", "Inicio"),
    NavRoute("users_list", "users", "Usuarios"),
    NavRoute("user_new", "users/new", "Nuevo usuario"),
]


async def authenticated_guard(auth: SessionSource) -> GuardDecision:
    session = await auth.current_session()
    if session.present:
        return GuardDecision(allowed=True)
    return GuardDecision(allowed=False, redirect_to=SIGN_IN_ROUTE)


async def not_authenticated_guard(auth: SessionSource) -> GuardDecision:
    session = await auth.current_session()
    if session.present:
        return GuardDecision(allowed=False, redirect_to=DASHBOARD_ROUTE)
    return GuardDecision(allowed=True)


Guard = Callable[[SessionSource], Awaitable[GuardDecision]]


def _segments(path: str) -> list[str]:
    return [segment for segment in urlsplit(path).path.split("/") if segment]


def _match_auth_child(rest: list[str]) -> RouteResolution | str:
    child = "/".join(rest)
    route = next((item for item in AUTH_ROUTES if item.path == child), None)
    if route is None:
        return SIGN_IN_ROUTE
    return RouteResolution(path=f"{AUTH_ROOT}/{route.path}", view=route.key)


def _match_dashboard_child(rest: list[str]) -> RouteResolution | str:
    child = "/".join(rest)
    route = next((item for item in DASHBOARD_ROUTES if item.path == child), None)
    if route is not None:
        path = f"{DASHBOARD_ROUTE}/{route.path}" if route.path else DASHBOARD_ROUTE
        return RouteResolution(path=path, view=route.key)
    if len(rest) == 2 and rest[0] == "users":
        return RouteResolution(path=f"{USERS_ROUTE}/{rest[1]}", view="user_edit", params={"id": rest[1]})
    return USERS_ROUTE


async def resolve_route(path: str, auth: SessionSource) -> RouteResolution:
    """Apply the subtree guards and follow redirects until a view matches.

    ``/auth/**`` requires no session, ``/dashboard/**`` requires one and any
    other path redirects to ``/auth``.
    """
    current = path or "/"
    for _ in range(MAX_REDIRECTS):
        segments = _segments(current)
        root = segments[0] if segments else ""
        if root == "auth":
            guard: Guard = not_authenticated_guard
            matcher = _match_auth_child
        elif root == "dashboard":
            guard = authenticated_guard
            matcher = _match_dashboard_child
        else:
            current = AUTH_ROOT
            continue

        decision = await guard(auth)
        if not decision.allowed:
            current = decision.redirect_to or AUTH_ROOT
            continue
        matched = matcher(segments[1:])
        if isinstance(matched, RouteResolution):
            return matched
        current = matched
    raise RuntimeError(f"Too many redirects resolving {path!r}")
