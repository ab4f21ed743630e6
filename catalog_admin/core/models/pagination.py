"""Length-aware pagination container."""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of results plus the metadata a list view needs to render links."""

    items: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    per_page: int = Field(default=10, ge=1)
    current_page: int = Field(default=1, ge=1)

    @computed_field
    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    @computed_field
    @property
    def first_item(self) -> int | None:
        """1-based position of the first item on this page, None when empty."""
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @computed_field
    @property
    def last_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + len(self.items)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page

    @staticmethod
    def offset_for(page: int, per_page: int) -> int:
        return (page - 1) * per_page


def normalize_page(raw: str | int | None) -> int:
    """Coerce a ``page`` query value to a positive page number, defaulting to 1."""
    try:
        page = int(raw) if raw is not None else 1
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1
