"""Product database table model."""

from decimal import Decimal
from typing import Optional

from sqlmodel import Field, Relationship

from catalog_admin.entities.catalog.category import CategoryTable
from catalog_admin.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    The unique indexes on ``slug`` and ``sku`` back the uniqueness rules the
    form validation checks before writing.
    """

    __tablename__ = "products"

    name: str = Field(max_length=255, index=True)
    slug: str = Field(max_length=255, unique=True)
    description: str | None = None
    sku: str = Field(max_length=50, unique=True)
    price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    stock: int = Field(default=0)
    product_category_id: int | None = Field(
        default=None, foreign_key="product_categories.id", nullable=True
    )
    image: str | None = Field(default=None, max_length=2048)
    is_active: bool = Field(default=False)

    category: Optional[CategoryTable] = Relationship()
