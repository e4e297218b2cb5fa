from __future__ import annotations

import argparse
import asyncio
import getpass
from collections.abc import Awaitable, Callable

from supa_admin.app.application.errors import FormValidationError
from supa_admin.app.bootstrap import AdminBootstrap
from supa_admin.app.config import AppConfig
from supa_admin.app.domain.models.user import ALL, KNOWN_ROLES
from supa_admin.app.navigation_shell import AUTH_ROOT, DASHBOARD_ROUTE, resolve_route
from supa_admin.app.ui.components.mutation_feedback import (
    print_bulk_summary,
    print_mutation_error,
    print_mutation_success,
)
from supa_admin.app.ui.formatting import format_date
from supa_admin.app.ui.table_printer import print_users_table
from supa_admin.app.ui.views.users_list_view import UsersListController
from supa_admin.clients.supabase_sdk.config import ConfigError
from supa_admin.clients.supabase_sdk.errors import RemoteError

Ask = Callable[[str], Awaitable[str]]

HELP = """Comandos:
  buscar <texto>        filtra por nombre o email (vacío = sin filtro)
  rol <rol|all>         filtra por rol (admin, moderator, user)
  estado <estado|all>   filtra por estado (active, inactive, suspended)
  pagina <n> | sig | ant | primera | ultima
  tam <n>               usuarios por página
  sel <id>              marca/desmarca un usuario
  todos                 marca/desmarca la página visible
  borrar <id>           elimina un usuario
  toggle <id>           activa/desactiva un usuario
  bborrar | bactivar | bdesactivar   acciones sobre la selección
  nuevo | editar <id>   formulario de usuario
  refrescar | limpiar | cerrar | ayuda | salir"""


async def console_ask(message: str) -> str:
    return await asyncio.to_thread(input, message)


async def console_ask_secret(message: str) -> str:
    return await asyncio.to_thread(getpass.getpass, message)


class UsersConsole:
    """Text rendering of the users list controller plus a command dispatcher."""

    def __init__(self, app: AdminBootstrap, *, ask: Ask = console_ask) -> None:
        self.app = app
        self.ask = ask
        self.list: UsersListController = app.users_list()

    def render(self) -> None:
        stats = self.list.stats
        print(
            f"\n[stats] total={stats.total} activos={stats.active} "
            f"inactivos={stats.inactive} nuevos_mes={stats.new_this_month}"
        )
        page = self.list.users
        print_users_table("-- Usuarios --", page.users, self.list.selected_user_ids)
        pages = " ".join(
            f"[{number}]" if number == self.list.current_page else str(number) for number in self.list.page_numbers()
        )
        print(f"[pagina] {self.list.current_page}/{page.total_pages or 1} ({page.total} resultados) {pages}")
        print(
            f"[filtros] buscar='{self.list.search_term}' rol={self.list.selected_role} "
            f"estado={self.list.selected_status} tam={self.list.page_limit}"
        )
        if self.list.has_selected_users:
            print(f"[selection] seleccionados={self.list.selected_count}")

    async def handle(self, line: str) -> bool:
        """Run one command. Returns False when the shell should stop."""
        command, _, argument = line.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()
        self.app.banner.dismiss()

        if command in {"salir", "exit", "q"}:
            return False
        if command in {"", "ayuda", "help"}:
            print(HELP)
        elif command == "buscar":
            self.list.on_search(argument)
        elif command == "rol":
            self._filter_role(argument)
        elif command == "estado":
            self.list.on_filter_change(status=argument.lower() or ALL)
        elif command == "pagina":
            self._goto(argument)
        elif command == "sig":
            self.list.go_to_next_page()
        elif command == "ant":
            self.list.go_to_prev_page()
        elif command == "primera":
            self.list.go_to_first_page()
        elif command == "ultima":
            self.list.go_to_last_page()
        elif command == "tam":
            self._resize(argument)
        elif command == "sel":
            self.list.toggle_user_selection(argument)
        elif command == "todos":
            self.list.toggle_all_selection()
        elif command == "borrar":
            await self._delete(argument)
        elif command == "toggle":
            await self._toggle(argument)
        elif command == "bborrar":
            result = await self.list.on_bulk_delete()
            if result is not None:
                print_bulk_summary("bulk_delete", result)
        elif command in {"bactivar", "bdesactivar"}:
            result = await self.list.on_bulk_toggle_status(command == "bactivar")
            if result is not None:
                print_bulk_summary(command, result)
        elif command == "nuevo":
            await self._edit(None)
        elif command == "editar":
            await self._edit(argument or None)
        elif command == "refrescar":
            await self.list.on_refresh()
        elif command == "limpiar":
            self.list.on_clear_filters()
        elif command == "cerrar":
            await self.app.auth.sign_out()
            print("[auth] sesión cerrada")
            return False
        else:
            self.app.banner.show(f"Comando no reconocido: {command}")
        return True

    def _filter_role(self, argument: str) -> None:
        role = argument.lower() or ALL
        if role != ALL and role not in KNOWN_ROLES:
            self.app.banner.show(f"Rol no válido: {argument}")
            return
        self.list.on_filter_change(role=role)

    def _goto(self, argument: str) -> None:
        if not argument.isdigit() or int(argument) < 1:
            self.app.banner.show("La página debe ser un número mayor a 0.")
            return
        self.list.on_page_change(int(argument))

    def _resize(self, argument: str) -> None:
        if not argument.isdigit() or int(argument) < 1:
            self.app.banner.show("El tamaño de página debe ser un número mayor a 0.")
            return
        self.list.on_page_size_change(int(argument))

    async def _delete(self, user_id: str) -> None:
        user = self.app.collection.get_user_from_state(user_id)
        if user is None:
            self.app.banner.show(f"Usuario {user_id} no está en la lista.")
            return
        if await self.list.on_delete_user(user.id, user.name):
            print_mutation_success("delete", user.id)

    async def _toggle(self, user_id: str) -> None:
        user = self.app.collection.get_user_from_state(user_id)
        if user is None:
            self.app.banner.show(f"Usuario {user_id} no está en la lista.")
            return
        if await self.list.on_toggle_user_status(user.id, user.status, user.name):
            print_mutation_success("set_status", user.id)

    async def _edit(self, user_id: str | None) -> None:
        editor = self.app.user_editor(user_id)
        await editor.on_init()
        if editor.submit_error:
            self.app.banner.show(editor.submit_error)
            return
        print(f"\n-- {editor.page_title} -- (Enter conserva el valor actual)")
        for field in ("name", "email", "role"):
            current = editor.values.get(field, "")
            answer = await self.ask(f"{field} [{current}]: ")
            if answer.strip():
                editor.set_field(field, answer)
        try:
            saved = await editor.on_submit()
        except FormValidationError as error:
            self.app.banner.show(error)
            for field, message in error.field_errors.items():
                print(f"  {field}: {message}")
            return
        except RemoteError as error:
            print_mutation_error("update" if editor.is_edit_mode else "create", error)
            return
        print_mutation_success("update" if editor.is_edit_mode else "create", saved.id)


async def _sign_in_flow(app: AdminBootstrap, ask: Ask, ask_secret: Ask) -> bool:
    print("\n-- Iniciar sesión -- (escribe 'registro' como email para crear una cuenta, 'google' para OAuth)")
    email = await ask("email: ")
    if email.strip().lower() == "google":
        print(f"Abre este enlace en el navegador: {app.sign_in().sign_in_with_google()}")
        return False
    if email.strip().lower() == "registro":
        controller = app.sign_up()
        email = await ask("email: ")
        password = await ask_secret("contraseña: ")
        route = await controller.on_submit(email, password)
    else:
        controller = app.sign_in()
        password = await ask_secret("contraseña: ")
        route = await controller.on_submit(email, password)
    if controller.message:
        print(f"[auth] {controller.message.message}")
    for field, message in controller.field_errors.items():
        print(f"  {field}: {message}")
    return route == DASHBOARD_ROUTE


async def run_console(
    app: AdminBootstrap,
    *,
    start_route: str = DASHBOARD_ROUTE,
    callback_url: str | None = None,
    ask: Ask = console_ask,
    ask_secret: Ask = console_ask_secret,
) -> None:
    try:
        if callback_url:
            callback = app.auth_callback()
            if await callback.process(callback_url) is None:
                print(f"[auth] {callback.error_message}")
                return
            print("[auth] invitación aceptada, cuenta activada")

        route = await resolve_route(start_route, app.auth)
        while route.path.startswith(AUTH_ROOT):
            if not await _sign_in_flow(app, ask, ask_secret):
                return
            route = await resolve_route(DASHBOARD_ROUTE, app.auth)

        try:
            profile = await app.auth.get_current_user()
            print(f"\n[sesion] {profile.name} <{profile.email}> desde {format_date(profile.created_at)}")
        except RemoteError as error:
            app.banner.show(error)

        console = UsersConsole(app, ask=ask)
        await console.list.on_init()
        if route.view == "user_new":
            await console.handle("nuevo")
        elif route.view == "user_edit":
            await console.handle(f"editar {route.params['id']}")
        print(HELP)
        while True:
            console.render()
            line = await ask("\n> ")
            if not await console.handle(line):
                return
    finally:
        await app.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="supa-admin", description="Consola de administración de usuarios")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--route", default=DASHBOARD_ROUTE, help="ruta inicial, p.ej. /dashboard/users")
    parser.add_argument("--callback", default=None, help="URL de callback de invitación con access_token y refresh_token")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        config = AppConfig.from_env(args.env_file)
    except ConfigError as error:
        print(f"[config] {error}")
        raise SystemExit(2) from error
    asyncio.run(run_console(AdminBootstrap(config), start_route=args.route, callback_url=args.callback))


if __name__ == "__main__":
    main()
