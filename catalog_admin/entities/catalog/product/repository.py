from loguru import logger
from sqlmodel import Session, func, or_, select

from catalog_admin.core.models.pagination import Page
from catalog_admin.entities.catalog.category import Category

from .entity import Product
from .table import ProductTable

# Columns written from the entity; timestamps and id are managed by the table.
_PERSISTED_FIELDS = (
    "name",
    "slug",
    "description",
    "sku",
    "price",
    "stock",
    "product_category_id",
    "image",
    "is_active",
)


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: ProductTable, with_category: bool = False) -> Product:
        # Built from columns only so the category relationship is not lazy-loaded per row.
        product = Product.model_validate(
            {name: getattr(row, name) for name in ("id", "created_at", "updated_at", *_PERSISTED_FIELDS)}
        )
        if with_category and row.category is not None:
            product.category = Category.model_validate(row.category, from_attributes=True)
        return product

    def find(self, product_id: int, with_category: bool = False) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return self._to_entity(row, with_category=with_category)

    def query(self, search: str | None = None, page: int = 1, per_page: int = 10) -> Page[Product]:
        """Return one page of products, optionally filtered by name OR sku substring."""
        statement = select(ProductTable)
        count_statement = select(func.count()).select_from(ProductTable)
        if search:
            clause = or_(
                ProductTable.name.contains(search, autoescape=True),
                ProductTable.sku.contains(search, autoescape=True),
            )
            statement = statement.where(clause)
            count_statement = count_statement.where(clause)

        total = self._session.exec(count_statement).one()
        rows = self._session.exec(
            statement.order_by(ProductTable.id)
            .offset(Page.offset_for(page, per_page))
            .limit(per_page)
        ).all()
        return Page[Product](
            items=[self._to_entity(row) for row in rows],
            total=total,
            per_page=per_page,
            current_page=page,
        )

    def exists_with(self, field: str, value: str, exclude_id: int | None = None) -> bool:
        """Whether another product already uses ``value`` for ``field``."""
        column = getattr(ProductTable, field)
        statement = select(ProductTable.id).where(column == value)
        if exclude_id is not None:
            statement = statement.where(ProductTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def save(self, product: Product) -> Product:
        """Insert a new product or overwrite the persisted columns of an existing one."""
        values = {name: getattr(product, name) for name in _PERSISTED_FIELDS}
        if product.id is None:
            row = ProductTable(**values)
            self._session.add(row)
        else:
            row = self._session.get(ProductTable, product.id)
            if row is None:
                raise ValueError(f"Product with id {product.id} not found")
            for name, value in values.items():
                setattr(row, name, value)
            self._session.add(row)

        self._session.commit()
        self._session.refresh(row)
        product.id = row.id
        product.created_at = row.created_at
        product.updated_at = row.updated_at
        logger.debug("Saved product {} ({})", row.id, row.sku)
        return product

    def delete(self, product_id: int) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.commit()
        return True

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(ProductTable)).one()
