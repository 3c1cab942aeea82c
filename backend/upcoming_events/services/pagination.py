"""services/pagination.py — Sooner/later links for the event list."""

from __future__ import annotations

from upcoming_events.schemas.shared import PaginationState


class Pagination:
    def __init__(self, prev: int | bool = False, next: int | bool = False) -> None:
        self.prev = prev
        self.next = next

    @classmethod
    def for_page(cls, page: int, more: bool) -> "Pagination":
        return cls(
            prev=page - 1 if page > 1 else False,
            next=page + 1 if more else False,
        )

    def export_for_template(self) -> PaginationState:
        return PaginationState(
            has_previous=self.prev is not False,
            has_next=self.next is not False,
            previous_page=self.prev,
            next_page=self.next,
        )
