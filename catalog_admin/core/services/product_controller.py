"""Product CRUD operations for the admin dashboard.

Each public method handles one dashboard request and returns either a
:class:`ViewResult` (render a template) or an :class:`ActionResult`
(redirect with flash state). HTTP concerns stay in the router.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from catalog_admin.core.exceptions import NotFoundError, ValidationError
from catalog_admin.core.models import ActionResult, ViewResult, normalize_page
from catalog_admin.core.services.storage import BlobStorage, IncomingFile, timestamped_filename
from catalog_admin.core.validation import (
    create_product_validator,
    parse_bool_permissive,
    parse_bool_strict,
    update_product_validator,
)
from catalog_admin.entities.catalog.category import CategoryRepository
from catalog_admin.entities.catalog.product import Product, ProductRepository
from catalog_admin.runtime.config.config_data import ConfigData
from catalog_admin.runtime.context import get_config

INDEX_ROUTE = "products.index"

# Fields copied from a validated form onto a record; anything else is ignored.
CREATE_FIELDS = (
    "name",
    "slug",
    "description",
    "sku",
    "price",
    "stock",
    "product_category_id",
    "is_active",
)
UPDATE_FIELDS = (*CREATE_FIELDS, "image_url")

# Browsers drop cookies over 4 KB; this leaves room for errors and the signature.
OLD_INPUT_BUDGET = 1024


def _coerce(field: str, value: Any) -> Any:
    if value is None:
        return None
    if field == "price":
        return Decimal(str(value))
    if field in ("stock", "product_category_id"):
        return int(value)
    return value


def _echo_input(fields: Mapping[str, Any], budget: int = OLD_INPUT_BUDGET) -> dict[str, Any]:
    """Submitted text values to repopulate the form with.

    Files and ``_``-prefixed fields are dropped. Old input travels in the
    session cookie, so values are kept shortest first while their encoded
    size fits ``budget`` bytes; anything longer comes back blank.
    """
    candidates = sorted(
        (
            (key, value, len(key) + len(json.dumps(value)))
            for key, value in fields.items()
            if isinstance(value, str) and not key.startswith("_")
        ),
        key=lambda candidate: candidate[2],
    )
    echoed: dict[str, Any] = {}
    used = 0
    for key, value, size in candidates:
        if used + size > budget:
            logger.bind(field=key, size=size).debug("product.old_input_dropped")
            continue
        echoed[key] = value
        used += size
    return echoed


class ProductController:
    """Coordinates validation, persistence and image storage for products."""

    def __init__(
        self,
        products: ProductRepository,
        categories: CategoryRepository,
        storage: BlobStorage,
        config: ConfigData | None = None,
    ) -> None:
        self._products = products
        self._categories = categories
        self._storage = storage
        self._config = config

    @property
    def config(self) -> ConfigData:
        """Injected configuration, or the current context's when none was given."""
        return self._config or get_config()

    def find_or_fail(self, product_id: int, with_category: bool = False) -> Product:
        product = self._products.find(product_id, with_category=with_category)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def list(self, q: str | None = None, page: str | int | None = None) -> ViewResult:
        config = self.config
        search = q.strip() if q else None
        result = self._products.query(
            search=search or None,
            page=normalize_page(page),
            per_page=config.catalog.page_size,
        )
        return ViewResult(
            template="dashboard/products/index.html",
            context={"products": result, "q": q},
        )

    def create_form(self) -> ViewResult:
        return ViewResult(
            template="dashboard/products/create.html",
            context={"categories": self._categories.list_all()},
        )

    def store(self, fields: Mapping[str, Any], image: IncomingFile | None = None) -> ActionResult:
        messages = self.config.messages
        validator = create_product_validator(self._products, self._categories)
        try:
            data = validator.validate(fields)
        except ValidationError as e:
            logger.bind(fields=sorted(e.errors)).info("product.validation_failed")
            return ActionResult.invalid(
                errors=e.errors,
                message=messages.validation_failed,
                old_input=_echo_input(fields),
            )

        values = {name: _coerce(name, data.get(name)) for name in CREATE_FIELDS if name != "is_active"}
        product = Product(**values, is_active=parse_bool_permissive(data.get("is_active")))

        self._save(product, image)
        logger.bind(product_id=product.id, sku=product.sku).info("product.created")
        return ActionResult.success(INDEX_ROUTE, messages.product_created)

    def show(self, product_id: int) -> ViewResult:
        product = self.find_or_fail(product_id, with_category=True)
        return ViewResult(template="dashboard/products/show.html", context={"product": product})

    def edit_form(self, product_id: int) -> ViewResult:
        product = self.find_or_fail(product_id)
        return ViewResult(
            template="dashboard/products/edit.html",
            context={"product": product, "categories": self._categories.list_all()},
        )

    def update(
        self,
        product_id: int,
        fields: Mapping[str, Any],
        image: IncomingFile | None = None,
    ) -> ActionResult:
        messages = self.config.messages
        validator = update_product_validator(product_id, self._products, self._categories)
        try:
            data = validator.validate(fields)
        except ValidationError as e:
            logger.bind(product_id=product_id, fields=sorted(e.errors)).info(
                "product.validation_failed"
            )
            # No old input here: the edit form repopulates from the stored record.
            return ActionResult.invalid(errors=e.errors, message=messages.validation_failed)

        product = self._products.find(product_id)
        if product is None:
            logger.bind(product_id=product_id).info("product.not_found")
            return ActionResult.not_found(messages.not_found)

        for name in UPDATE_FIELDS:
            if name not in data:
                continue
            value = data[name]
            if name == "is_active":
                product.is_active = parse_bool_strict(value)
            elif name == "image_url":
                if value is not None:
                    product.image = value
            else:
                setattr(product, name, _coerce(name, value))

        self._save(product, image)
        logger.bind(product_id=product.id).info("product.updated")
        return ActionResult.success(INDEX_ROUTE, messages.product_updated)

    def destroy(self, product_id: int) -> ActionResult:
        messages = self.config.messages
        if not self._products.delete(product_id):
            logger.bind(product_id=product_id).info("product.not_found")
            return ActionResult.not_found(messages.not_found)

        logger.bind(product_id=product_id).info("product.deleted")
        return ActionResult.success(INDEX_ROUTE, messages.product_deleted)

    def _save(self, product: Product, image: IncomingFile | None) -> None:
        """Store ``image`` onto ``product`` and persist it; no orphaned file if the save fails."""
        stored = None
        if image is not None:
            stored = product.image = self._store_image(image)
        try:
            self._products.save(product)
        except SQLAlchemyError:
            if stored is not None:
                self._storage.delete(stored)
                logger.bind(path=stored).warning("product.image_discarded")
            raise

    def _store_image(self, image: IncomingFile) -> str:
        directory = self.config.storage.product_images_dir
        return self._storage.store(directory, timestamped_filename(image.filename), image.stream)
