from sqlmodel import Session, func, select

from .entity import Category
from .table import CategoryTable


class CategoryRepository:
    """Data-access layer for categories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def exists(self, category_id: int) -> bool:
        return self._session.get(CategoryTable, category_id) is not None

    def list_all(self) -> list[Category]:
        rows = self._session.exec(select(CategoryTable).order_by(CategoryTable.name)).all()
        return [Category.model_validate(row, from_attributes=True) for row in rows]

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(CategoryTable)).one()

    def create(self, category: Category) -> Category:
        row = CategoryTable.model_validate(
            category.model_dump(exclude={"id"}, exclude_none=True)
        )
        self._session.add(row)
        self._session.flush()
        category.id = row.id
        return category
