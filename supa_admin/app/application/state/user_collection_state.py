from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from supa_admin.app.application.errors import LoadError
from supa_admin.app.domain.mappers.user_mapper import map_record
from supa_admin.app.domain.models.user import (
    PaginatedUsers,
    User,
    UserChanges,
    UserFilters,
    UserInput,
    UserStats,
    UserStatus,
)
from supa_admin.app.domain.policies.user_projection import apply_filters, compute_stats, paginate
from supa_admin.app.infrastructure.logging.logger import get_logger, log_action
from supa_admin.clients.supabase_sdk.errors import RemoteError

MODULE = "users"


class UserCollectionState:
    """Canonical users list plus the filter state every view is derived from.

    Writes go to the backend first and the local list is reconciled only after
    the backend confirms. Filtered, paginated and aggregated views are computed
    on each read and never cached.
    """

    def __init__(self, gateway: Any, *, logger: logging.Logger | None = None) -> None:
        self.gateway = gateway
        self.logger = logger or get_logger("supa_admin.users")
        self.filters = UserFilters()
        self.error: str | None = None
        self._users: list[User] = []
        self._in_flight: Counter[str] = Counter()
        self._load_generation = 0

    @property
    def all_users(self) -> list[User]:
        return list(self._users)

    @property
    def users(self) -> list[User]:
        return apply_filters(self._users, self.filters)

    def paginated(self) -> PaginatedUsers:
        return paginate(self.users, self.filters)

    def stats(self, now: datetime | None = None) -> UserStats:
        return compute_stats(self._users, now)

    @property
    def is_loading(self) -> bool:
        return any(count > 0 for count in self._in_flight.values())

    def is_operation_loading(self, operation: str) -> bool:
        return self._in_flight[operation] > 0

    @contextmanager
    def _operation(self, operation: str) -> Iterator[None]:
        self._in_flight[operation] += 1
        try:
            yield
        finally:
            self._in_flight[operation] -= 1
            if self._in_flight[operation] <= 0:
                del self._in_flight[operation]

    def _record_failure(self, action: str, error: RemoteError) -> None:
        self.error = error.message
        log_action(self.logger, MODULE, action, "error", trace_id=error.trace_id, level=logging.WARNING)

    async def load(self) -> list[User]:
        self._load_generation += 1
        generation = self._load_generation
        with self._operation("load"):
            try:
                rows = await self.gateway.list_users()
            except RemoteError as error:
                if generation == self._load_generation:
                    self._record_failure("load", error)
                else:
                    log_action(self.logger, MODULE, "load", "stale_error", trace_id=error.trace_id, level=logging.DEBUG)
                raise LoadError(error.message) from error

        if generation != self._load_generation:
            log_action(self.logger, MODULE, "load", "stale_ignored", level=logging.DEBUG)
            return self.all_users

        self._users = [map_record(row) for row in rows]
        self.error = None
        log_action(self.logger, MODULE, "load", "success", count=len(self._users))
        return self.all_users

    async def refresh(self) -> list[User]:
        return await self.load()

    def set_filters(self, partial: Mapping[str, Any] | UserFilters | None) -> UserFilters:
        self.filters = self.filters.merge(partial)
        return self.filters

    def clear_filters(self) -> UserFilters:
        self.filters = UserFilters()
        return self.filters

    def search_users(self, term: str) -> list[User]:
        self.set_filters({"search": term})
        return self.users

    def get_filtered_users(self, filters: Mapping[str, Any] | UserFilters) -> list[User]:
        self.set_filters(filters)
        return self.users

    def get_user_from_state(self, user_id: str) -> User | None:
        return next((user for user in self._users if user.id == user_id), None)

    async def get_user(self, user_id: str) -> User:
        with self._operation("get"):
            try:
                row = await self.gateway.get_user(user_id)
            except RemoteError as error:
                self._record_failure("get", error)
                raise
        return map_record(row)

    async def create(self, data: UserInput) -> User:
        with self._operation("create"):
            try:
                row = await self.gateway.create_user(data)
            except RemoteError as error:
                self._record_failure("create", error)
                raise
        created = map_record(row)
        self._users = [*self._users, created]
        self.error = None
        log_action(self.logger, MODULE, "create", "success")
        return created

    async def update(self, user_id: str, changes: UserChanges) -> User:
        with self._operation("update"):
            try:
                row = await self.gateway.update_user(user_id, changes)
            except RemoteError as error:
                self._record_failure("update", error)
                raise
        updated = map_record(row)
        self._replace(user_id, updated)
        self.error = None
        log_action(self.logger, MODULE, "update", "success")
        return updated

    async def delete(self, user_id: str) -> None:
        with self._operation("delete"):
            try:
                await self.gateway.delete_user(user_id)
            except RemoteError as error:
                self._record_failure("delete", error)
                raise
        self._users = [user for user in self._users if user.id != user_id]
        self.error = None
        log_action(self.logger, MODULE, "delete", "success")

    async def set_status(self, user_id: str, active: bool) -> User:
        with self._operation("set_status"):
            try:
                row = await self.gateway.set_user_status(user_id, active)
            except RemoteError as error:
                self._record_failure("set_status", error)
                raise
        # the local record always reflects the requested status
        status = UserStatus.ACTIVE.value if active else UserStatus.INACTIVE.value
        updated = map_record(row).with_status(status)
        self._replace(user_id, updated)
        self.error = None
        log_action(self.logger, MODULE, "set_status", "success")
        return updated

    def _replace(self, user_id: str, updated: User) -> None:
        self._users = [updated if user.id == user_id else user for user in self._users]

    def clear_state(self) -> None:
        self._users = []
        self.filters = UserFilters()
        self.error = None
        self._in_flight.clear()
        self._load_generation += 1
