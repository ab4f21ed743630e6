"""Entity: Category."""

from typing import Any

from pydantic import Field

from catalog_admin.entities.core._base import Entity


class Category(Entity):
    """Product category. Read-only from the product dashboard's point of view."""

    name: str = Field(description="Display name")
    slug: str | None = Field(default=None, description="URL-safe identifier")

    def __eq__(self, other: Any) -> bool:
        """Compare categories by business attributes, ignoring timestamps."""
        if not isinstance(other, Category):
            return False
        return self.id == other.id and self.name == other.name

    def __hash__(self) -> int:
        return hash((self.id, self.name))
