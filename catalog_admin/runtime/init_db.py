"""Database initialization: create tables and seed default categories."""

from loguru import logger

from catalog_admin.core.services.database.db_session import DbSessionService
from catalog_admin.entities.catalog.category import Category, CategoryRepository

DEFAULT_CATEGORIES = [
    {"name": "Beverages", "slug": "beverages"},
    {"name": "Snacks", "slug": "snacks"},
    {"name": "Household", "slug": "household"},
    {"name": "Personal Care", "slug": "personal-care"},
    {"name": "Electronics", "slug": "electronics"},
    {"name": "Stationery", "slug": "stationery"},
]


def seed_categories(db_service: DbSessionService) -> int:
    """Insert the default categories when the table is empty. Returns how many were added."""
    with db_service.session_scope() as session:
        repository = CategoryRepository(session)
        existing = repository.count()
        if existing > 0:
            logger.info("Categories already exist ({} found); skipping seed", existing)
            return 0

        for data in DEFAULT_CATEGORIES:
            repository.create(Category(**data))
        logger.info("Seeded {} categories", len(DEFAULT_CATEGORIES))
        return len(DEFAULT_CATEGORIES)


def init_db(db_service: DbSessionService | None = None, seed: bool = True) -> None:
    """Create all database tables and optionally seed categories."""
    db_service = db_service or DbSessionService()
    db_service.create_all()
    if seed:
        seed_categories(db_service)


if __name__ == "__main__":
    init_db()
