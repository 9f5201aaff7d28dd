"""Product repository for data access operations."""

from sqlmodel import Session, col, or_, select

from src.catalog.entities.core._base import touch

from .entity import Product, ProductCreate, ProductQuery, ProductUpdate
from .table import ProductTable


def _like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in ``term`` escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepository:
    """Data-access layer for products.

    Writes are flushed but not committed; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, data: ProductCreate, image_key: str | None = None) -> Product:
        row = ProductTable(**data.model_dump(), image_key=image_key)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def get(self, product_id: int) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def find_all(self, query: ProductQuery) -> list[Product]:
        """Filter, sort and paginate products.

        ``search`` matches name or category case-insensitively as a substring;
        ``category`` is an exact match. Rows that tie on the sort column are
        ordered by id ascending so that pages are stable.
        """
        statement = select(ProductTable)

        if query.search:
            pattern = _like_pattern(query.search)
            statement = statement.where(
                or_(
                    col(ProductTable.name).ilike(pattern, escape="\\"),
                    col(ProductTable.category).ilike(pattern, escape="\\"),
                )
            )

        if query.category:
            statement = statement.where(ProductTable.category == query.category)

        sort_column = col(getattr(ProductTable, query.sort_by))
        order = sort_column.desc() if query.sort_order == "desc" else sort_column.asc()
        statement = (
            statement.order_by(order, col(ProductTable.id).asc())
            .offset(query.offset)
            .limit(query.limit)
        )

        rows = self._session.exec(statement).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def update(
        self,
        product_id: int,
        update: ProductUpdate,
        image_key: str | None = None,
    ) -> Product | None:
        """Apply ``update`` and, when given, a new ``image_key``.

        Returns the updated product, or None when it does not exist.
        """
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None

        for field, value in update.changes().items():
            setattr(row, field, value)
        if image_key is not None:
            row.image_key = image_key
        touch(row)

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def delete(self, product_id: int) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def image_keys(self) -> set[str]:
        """Every image key currently referenced by a product."""
        statement = select(ProductTable.image_key).where(
            col(ProductTable.image_key).is_not(None)
        )
        return set(self._session.exec(statement).all())
