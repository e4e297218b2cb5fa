from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from supa_admin.app.application.errors import LoadError
from supa_admin.app.application.state.user_collection_state import UserCollectionState
from supa_admin.app.domain.models.user import (
    ALL,
    DEFAULT_LIMIT,
    BulkActionResult,
    PaginatedUsers,
    User,
    UserStats,
    UserStatus,
)
from supa_admin.app.ui import formatting
from supa_admin.app.ui.components.confirm_dialog import Confirm
from supa_admin.app.ui.components.error_banner import ErrorBanner
from supa_admin.app.ui.pagination import PaginationState, goto_page, next_page, page_window, prev_page, resize
from supa_admin.clients.supabase_sdk.errors import RemoteError


def _plural_users(count: int) -> str:
    return f"{count} usuario{'s' if count > 1 else ''}"


class UsersListController:
    """UI state of the users list: search and filter controls, paging and row selection.

    The canonical list lives in ``UserCollectionState``; this controller only
    pushes filters to it and reads the derived page back.
    """

    def __init__(
        self,
        collection: UserCollectionState,
        *,
        confirm: Confirm,
        banner: ErrorBanner | None = None,
        page_limit: int = DEFAULT_LIMIT,
    ) -> None:
        self.collection = collection
        self.confirm = confirm
        self.banner = banner or ErrorBanner()
        self.search_term = ""
        self.selected_role = ALL
        self.selected_status = ALL
        self.pagination = PaginationState(page_size=page_limit)
        self.selected_user_ids: list[str] = []
        self.last_bulk_result: BulkActionResult | None = None

    role_label = staticmethod(formatting.role_label)
    status_label = staticmethod(formatting.status_label)
    role_badge_class = staticmethod(formatting.role_badge_class)
    status_badge_class = staticmethod(formatting.status_badge_class)
    format_date = staticmethod(formatting.format_date)
    format_date_time = staticmethod(formatting.format_date_time)
    format_relative_time = staticmethod(formatting.format_relative_time)

    @property
    def current_page(self) -> int:
        return self.pagination.page

    @property
    def page_limit(self) -> int:
        return self.pagination.page_size

    @property
    def users(self) -> PaginatedUsers:
        return self.collection.paginated()

    @property
    def stats(self) -> UserStats:
        return self.collection.stats()

    @property
    def is_loading(self) -> bool:
        return self.collection.is_loading

    @property
    def error_message(self) -> str | None:
        return self.collection.error

    @property
    def is_all_selected(self) -> bool:
        visible = self.users.users
        return bool(visible) and all(user.id in self.selected_user_ids for user in visible)

    @property
    def has_selected_users(self) -> bool:
        return len(self.selected_user_ids) > 0

    @property
    def selected_count(self) -> int:
        return len(self.selected_user_ids)

    async def on_init(self) -> None:
        self._apply_filters()
        await self.load_users()

    async def load_users(self) -> list[User] | None:
        try:
            return await self.collection.load()
        except LoadError as error:
            self.banner.show(error)
            return None

    async def on_refresh(self) -> list[User] | None:
        self.selected_user_ids = []
        return await self.load_users()

    def _apply_filters(self) -> None:
        self.collection.set_filters(
            {
                "search": self.search_term.strip(),
                "role": self.selected_role,
                "status": self.selected_status,
                "page": self.pagination.page,
                "limit": self.pagination.page_size,
            }
        )

    def on_search(self, term: str | None = None) -> None:
        if term is not None:
            self.search_term = term
        goto_page(self.pagination, 1)
        self._apply_filters()
        self.selected_user_ids = []

    def on_filter_change(self, *, role: str | None = None, status: str | None = None) -> None:
        if role is not None:
            self.selected_role = role
        if status is not None:
            self.selected_status = status
        goto_page(self.pagination, 1)
        self._apply_filters()
        self.selected_user_ids = []

    def on_clear_filters(self) -> None:
        self.search_term = ""
        self.selected_role = ALL
        self.selected_status = ALL
        goto_page(self.pagination, 1)
        self.selected_user_ids = []
        self.collection.clear_filters()

    def on_page_change(self, page: int) -> None:
        goto_page(self.pagination, page)
        self._page_moved()

    def _page_moved(self) -> None:
        self._apply_filters()
        self.selected_user_ids = []

    def on_page_size_change(self, size: int) -> None:
        resize(self.pagination, size)
        self._apply_filters()
        self.selected_user_ids = []

    def page_numbers(self) -> list[int]:
        return page_window(self.current_page, self.users.total_pages)

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.users.total_pages

    def go_to_prev_page(self) -> None:
        if self.has_prev_page:
            prev_page(self.pagination)
            self._page_moved()

    def go_to_next_page(self) -> None:
        if self.has_next_page:
            next_page(self.pagination, has_next=True)
            self._page_moved()

    def go_to_first_page(self) -> None:
        self.on_page_change(1)

    def go_to_last_page(self) -> None:
        self.on_page_change(self.users.total_pages)

    def toggle_user_selection(self, user_id: str) -> None:
        if user_id in self.selected_user_ids:
            self.selected_user_ids = [item for item in self.selected_user_ids if item != user_id]
        else:
            self.selected_user_ids = [*self.selected_user_ids, user_id]

    def toggle_all_selection(self) -> None:
        if self.is_all_selected:
            self.selected_user_ids = []
        else:
            self.selected_user_ids = [user.id for user in self.users.users]

    async def on_delete_user(self, user_id: str, user_name: str) -> bool:
        if not await self.confirm(f'¿Estás seguro de que quieres eliminar al usuario "{user_name}"?'):
            return False
        try:
            await self.collection.delete(user_id)
        except RemoteError as error:
            self.banner.show(error)
            return False
        self.selected_user_ids = [item for item in self.selected_user_ids if item != user_id]
        return True

    async def on_toggle_user_status(self, user_id: str, current_status: str | None, user_name: str) -> bool:
        is_active = current_status == UserStatus.ACTIVE.value
        action = "desactivar" if is_active else "activar"
        if not await self.confirm(f'¿Estás seguro de que quieres {action} al usuario "{user_name}"?'):
            return False
        try:
            await self.collection.set_status(user_id, not is_active)
        except RemoteError as error:
            self.banner.show(error)
            return False
        return True

    async def on_bulk_delete(self) -> BulkActionResult | None:
        count = self.selected_count
        if count == 0:
            self.banner.show("Por favor, selecciona al menos un usuario para eliminar.")
            return None
        if not await self.confirm(f"¿Estás seguro de que quieres eliminar {_plural_users(count)}?"):
            return None
        result = await self._run_bulk(self.collection.delete)
        if result.failed:
            self.banner.show(f"Se eliminaron {result.succeeded} usuarios, pero {result.failed} fallaron.")
        return result

    async def on_bulk_toggle_status(self, activate: bool) -> BulkActionResult | None:
        action = "activar" if activate else "desactivar"
        count = self.selected_count
        if count == 0:
            self.banner.show(f"Por favor, selecciona al menos un usuario para {action}.")
            return None
        if not await self.confirm(f"¿Estás seguro de que quieres {action} {_plural_users(count)}?"):
            return None

        async def _set_status(user_id: str) -> None:
            await self.collection.set_status(user_id, activate)

        result = await self._run_bulk(_set_status)
        if result.failed:
            self.banner.show(f"Se {action}ron {result.succeeded} usuarios, pero {result.failed} fallaron.")
        return result

    async def _run_bulk(self, operation: Callable[[str], Awaitable[object]]) -> BulkActionResult:
        """One concurrent call per selected id; successes are kept even when others fail."""
        user_ids = list(self.selected_user_ids)
        outcomes = await asyncio.gather(*(operation(user_id) for user_id in user_ids), return_exceptions=True)

        result = BulkActionResult()
        for user_id, outcome in zip(user_ids, outcomes):
            if isinstance(outcome, RemoteError):
                result.outcomes.append(
                    {
                        "user_id": user_id,
                        "result": "error",
                        "code": outcome.code,
                        "message": outcome.message,
                        "trace_id": outcome.trace_id,
                    }
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.outcomes.append({"user_id": user_id, "result": "success"})

        succeeded = set(result.succeeded_ids)
        self.selected_user_ids = [item for item in self.selected_user_ids if item not in succeeded]
        self.last_bulk_result = result
        return result
