"""Field rules for the product create and update forms."""

from decimal import Decimal

from catalog_admin.entities.catalog.category import CategoryRepository
from catalog_admin.entities.catalog.product import ProductRepository

from .validator import (
    MAX_INTEGER,
    Validator,
    boolean,
    exists,
    integer,
    max_length,
    max_value,
    min_value,
    nullable,
    numeric,
    required,
    string,
    unique,
    url,
)

# price is NUMERIC(12, 2)
MAX_PRICE = Decimal("9999999999.99")


def _shared_rules(
    products: ProductRepository,
    categories: CategoryRepository,
    ignore_id: int | None,
) -> dict:
    return {
        "name": [required(), string(), max_length(255)],
        "slug": [
            required(),
            string(),
            max_length(255),
            unique(lambda value: products.exists_with("slug", value, exclude_id=ignore_id)),
        ],
        "description": [nullable(), string()],
        "sku": [
            required(),
            string(),
            max_length(50),
            unique(lambda value: products.exists_with("sku", value, exclude_id=ignore_id)),
        ],
        "price": [required(), numeric(), min_value(0), max_value(MAX_PRICE)],
        "stock": [required(), integer(), min_value(0), max_value(MAX_INTEGER)],
        "product_category_id": [nullable(), exists(categories.exists)],
    }


def create_product_validator(
    products: ProductRepository, categories: CategoryRepository
) -> Validator:
    rules = _shared_rules(products, categories, ignore_id=None)
    rules["is_active"] = [nullable(), boolean()]
    return Validator(rules)


def update_product_validator(
    product_id: int, products: ProductRepository, categories: CategoryRepository
) -> Validator:
    """Same as create, but slug and sku may keep the values of ``product_id`` itself."""
    rules = _shared_rules(products, categories, ignore_id=product_id)
    rules["image_url"] = [nullable(), url()]
    rules["is_active"] = [boolean()]
    return Validator(rules)
