"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session
from starlette.datastructures import FormData

from catalog_admin.api.http.app_data import ApplicationDependencies
from catalog_admin.core.services import BlobStorage, FlashBag, ProductController
from catalog_admin.entities.catalog.category import CategoryRepository
from catalog_admin.entities.catalog.product import ProductRepository
from catalog_admin.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_app_config(request: Request) -> ConfigData:
    """Configuration the running application was built with."""
    return request.app.state.config


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session that is closed once the request finishes."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_blob_storage(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> BlobStorage:
    return app_deps.blob_storage


def get_product_repository(db: Session = Depends(get_db_session)) -> ProductRepository:
    return ProductRepository(db)


def get_category_repository(db: Session = Depends(get_db_session)) -> CategoryRepository:
    return CategoryRepository(db)


def get_product_controller(
    products: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    storage: BlobStorage = Depends(get_blob_storage),
    config: ConfigData = Depends(get_app_config),
) -> ProductController:
    return ProductController(products, categories, storage, config=config)


def get_flash(request: Request) -> FlashBag:
    return FlashBag(request.session)


async def get_form(request: Request) -> FormData:
    """Parsed urlencoded or multipart request body."""
    return await request.form()
