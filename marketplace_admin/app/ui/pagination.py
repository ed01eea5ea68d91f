from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class PaginationState:
    page: int = 1
    limit: int = 10
    total: int | None = None
    total_pages: int | None = None
    has_next: bool | None = None

    @classmethod
    def from_listing(cls, listing: Any, *, page: int = 1, limit: int = 10) -> "PaginationState":
        if not isinstance(listing, dict):
            return cls(page=page, limit=limit)
        return cls(
            page=_as_int(listing.get("page"), page),
            limit=_as_int(listing.get("limit"), limit),
            total=listing.get("total"),
            total_pages=listing.get("total_pages"),
            has_next=listing.get("has_next"),
        )

    def label(self) -> str:
        pages = self.total_pages if self.total_pages is not None else "?"
        total = self.total if self.total is not None else "?"
        return f"page {self.page}/{pages} ({total} rows, {self.limit} per page)"


def next_page(state: PaginationState) -> PaginationState:
    if state.has_next is False:
        return state
    if state.total_pages is not None and state.page >= state.total_pages:
        return state
    state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(1, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int) -> PaginationState:
    target = max(1, page)
    if state.total_pages:
        target = min(target, state.total_pages)
    state.page = target
    return state


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
