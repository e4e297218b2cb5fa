from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable, Sequence

from supa_admin.app.domain.models.user import ALL, PaginatedUsers, User, UserFilters, UserStats, UserStatus


def _constrains(value: str | None) -> bool:
    return bool(value) and value != ALL


def matches_search(user: User, term: str) -> bool:
    probe = term.lower()
    return probe in (user.name or "").lower() or probe in (user.email or "").lower()


def apply_filters(users: Sequence[User], filters: UserFilters) -> list[User]:
    """Role, then status, then search. Order of the canonical set is preserved."""
    rows = list(users)
    if _constrains(filters.role):
        rows = [user for user in rows if user.role == filters.role]
    if _constrains(filters.status):
        rows = [user for user in rows if user.status == filters.status]
    if filters.search:
        rows = [user for user in rows if matches_search(user, filters.search)]
    return rows


def paginate(users: Sequence[User], filters: UserFilters) -> PaginatedUsers:
    page = filters.effective_page
    limit = filters.effective_limit
    offset = (page - 1) * limit
    total = len(users)
    return PaginatedUsers(
        users=list(users[offset : offset + limit]),
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = f"{normalized[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def compute_stats(users: Iterable[User], now: datetime | None = None) -> UserStats:
    """Aggregates over the full canonical set; search and pagination never shrink them.

    A user without ``created_at`` counts as created now.
    """
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    month_start = start_of_month(current)

    rows = list(users)
    new_this_month = 0
    for user in rows:
        created = parse_timestamp(user.created_at) if user.created_at else current
        if created is not None and created >= month_start:
            new_this_month += 1
    return UserStats(
        total=len(rows),
        active=sum(1 for user in rows if user.status == UserStatus.ACTIVE.value),
        inactive=sum(1 for user in rows if user.status == UserStatus.INACTIVE.value),
        new_this_month=new_this_month,
    )
