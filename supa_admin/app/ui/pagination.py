from __future__ import annotations

from dataclasses import dataclass

from supa_admin.app.domain.models.user import DEFAULT_LIMIT

MAX_VISIBLE_PAGES = 5


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = DEFAULT_LIMIT


def next_page(state: PaginationState, has_next: bool | None) -> PaginationState:
    if has_next is False:
        return state
    state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(1, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int) -> PaginationState:
    state.page = max(1, page)
    return state


def resize(state: PaginationState, page_size: int) -> PaginationState:
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    state.page_size = page_size
    state.page = 1
    return state


def page_window(current_page: int, total_pages: int, max_pages: int = MAX_VISIBLE_PAGES) -> list[int]:
    """Page numbers to offer around ``current_page``, at most ``max_pages`` of them."""
    if total_pages < 1:
        return []
    start = max(1, current_page - max_pages // 2)
    end = min(total_pages, start + max_pages - 1)
    if end - start < max_pages - 1:
        start = max(1, end - max_pages + 1)
    return list(range(start, end + 1))
