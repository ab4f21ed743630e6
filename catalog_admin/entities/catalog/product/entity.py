"""Entity: Product."""

from decimal import Decimal
from typing import Any

from pydantic import Field

from catalog_admin.entities.catalog.category import Category
from catalog_admin.entities.core._base import Entity


class Product(Entity):
    """Product entity representing one catalog record.

    ``image`` holds either a path relative to the blob storage root (uploads)
    or an absolute URL (set through ``image_url`` on update).
    """

    name: str = Field(description="Name")
    slug: str = Field(description="Unique URL-safe identifier")
    description: str | None = Field(default=None, description="Free-form description")
    sku: str = Field(description="Unique stock keeping unit")
    price: Decimal = Field(ge=0, description="Unit price")
    stock: int = Field(ge=0, description="Units in stock")
    product_category_id: int | None = Field(default=None, description="Category reference")
    image: str | None = Field(default=None, description="Storage path or URL of the image")
    is_active: bool = Field(default=False, description="Visible in the storefront")

    category: Category | None = Field(default=None, exclude=True)

    @property
    def has_external_image(self) -> bool:
        return bool(self.image) and self.image.startswith(("http://", "https://"))

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.slug == other.slug
            and self.sku == other.sku
            and self.name == other.name
        )

    def __hash__(self) -> int:
        return hash((self.id, self.slug, self.sku))
