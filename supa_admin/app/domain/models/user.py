from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping

ALL = "all"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class UserRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"


class UserStatus(str, Enum):
    """Known status values. The backend may send others; they are kept as plain strings."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


KNOWN_ROLES = frozenset(role.value for role in UserRole)


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    avatar: str = ""
    full_name: str | None = None
    created_at: str | None = None
    last_sign_in_at: str | None = None
    role: str | None = None
    status: str | None = None

    def with_status(self, status: str) -> "User":
        return replace(self, status=status)


@dataclass(frozen=True)
class Profile:
    id: str
    name: str
    email: str
    avatar: str
    full_name: str | None = None
    created_at: str = ""
    last_sign_in_at: str = ""
    provider: str = ""


@dataclass(frozen=True)
class UserFilters:
    search: str | None = None
    role: str | None = None
    status: str | None = None
    page: int | None = None
    limit: int | None = None

    def merge(self, partial: "Mapping[str, Any] | UserFilters | None" = None) -> "UserFilters":
        """Shallow overwrite of the given keys; an empty partial returns the same filters."""
        if partial is None:
            return self
        if isinstance(partial, UserFilters):
            partial = {key: value for key, value in partial.as_dict().items() if value is not None}
        if not partial:
            return self
        unknown = set(partial) - {item.name for item in fields(self)}
        if unknown:
            raise ValueError(f"Unknown filter keys: {sorted(unknown)}")
        return replace(self, **dict(partial))

    def as_dict(self) -> dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}

    @property
    def effective_page(self) -> int:
        return self.page if self.page and self.page > 0 else DEFAULT_PAGE

    @property
    def effective_limit(self) -> int:
        return self.limit if self.limit and self.limit > 0 else DEFAULT_LIMIT


@dataclass(frozen=True)
class PaginatedUsers:
    users: list[User]
    total: int
    page: int
    limit: int
    total_pages: int


@dataclass(frozen=True)
class UserStats:
    total: int
    active: int
    inactive: int
    new_this_month: int


@dataclass(frozen=True)
class UserInput:
    email: str
    name: str
    role: str = UserRole.USER.value


@dataclass(frozen=True)
class UserChanges:
    name: str | None = None
    email: str | None = None
    role: str | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.email is None and self.role is None


@dataclass
class BulkActionResult:
    outcomes: list[dict[str, Any]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.outcomes if item.get("result") == "success")

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def succeeded_ids(self) -> list[str]:
        return [item["user_id"] for item in self.outcomes if item.get("result") == "success"]
