"""Category database table model."""

from sqlmodel import Field

from catalog_admin.entities.core._base import EntityTable


class CategoryTable(EntityTable, table=True):
    """Database persistence model for product categories."""

    __tablename__ = "product_categories"

    name: str = Field(max_length=255)
    slug: str | None = Field(default=None, max_length=255, unique=True)
