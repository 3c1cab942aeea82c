"""schemas/shared.py — Reusable building blocks shared across schema modules."""

from pydantic import BaseModel, ConfigDict


class PaginationState(BaseModel):
    """Sooner/later links for the block. Page numbers are False when absent."""

    model_config = ConfigDict(from_attributes=False)

    has_previous: bool
    has_next: bool
    previous_page: int | bool = False
    next_page: int | bool = False
