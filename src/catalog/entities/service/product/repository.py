"""Product repository: the only component that reads or writes product rows."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from src.catalog.core.exceptions import StorePersistenceError
from src.catalog.entities._base import utcnow

from .entity import Product, ProductCreate
from .table import ProductTable

# Largest value an INTEGER primary key can hold on SQLite and PostgreSQL BIGINT
_MAX_ID = 2**63 - 1

_ORDERABLE = {
    "id": ProductTable.id,
    "name": ProductTable.name,
    "price": ProductTable.price,
}


class ProductRepository:
    """Data-access layer for products.

    Every method runs in the session handed in by the request. Writes are
    committed before returning; any ``SQLAlchemyError`` rolls the session
    back and is re-raised as :class:`StorePersistenceError`.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.bind(operation=operation, error_type=type(e).__name__).error(
                "Store operation failed: {}", operation
            )
            raise StorePersistenceError(operation) from e

    def list_all(self, order_by: str = "id") -> list[Product]:
        """Return every product, ascending by ``order_by``."""
        column = _ORDERABLE.get(order_by)
        if column is None:
            raise ValueError(f"Cannot order products by '{order_by}'")

        with self._store_call("list_all"):
            rows = self._session.exec(select(ProductTable).order_by(col(column).asc()))
            return [Product.model_validate(row) for row in rows.all()]

    def get(self, product_id: int) -> Product | None:
        row = self._get_row(product_id, "get")
        if row is None:
            return None
        return Product.model_validate(row)

    def create(self, data: ProductCreate) -> Product:
        row = ProductTable(name=data.name, price=data.price)
        with self._store_call("create"):
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        logger.info("Created product {}", row.id)
        return Product.model_validate(row)

    def update(self, product_id: int, fields: dict[str, Any]) -> Product | None:
        """Overwrite ``fields`` on the product; ``None`` when it does not exist."""
        return self._modify(product_id, "update", lambda row: fields)

    def toggle_availability(self, product_id: int) -> Product | None:
        """Flip ``availability`` against the value currently stored."""
        return self._modify(
            product_id,
            "toggle_availability",
            lambda row: {"availability": not row.availability},
        )

    def delete(self, product_id: int) -> bool:
        row = self._get_row(product_id, "delete")
        if row is None:
            return False

        with self._store_call("delete"):
            self._session.delete(row)
            self._session.commit()
        logger.info("Deleted product {}", product_id)
        return True

    def _modify(
        self,
        product_id: int,
        operation: str,
        changes: Callable[[ProductTable], dict[str, Any]],
    ) -> Product | None:
        row = self._get_row(product_id, operation)
        if row is None:
            return None

        with self._store_call(operation):
            for field, value in changes(row).items():
                setattr(row, field, value)
            row.updated_at = utcnow()
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        return Product.model_validate(row)

    def _get_row(self, product_id: int, operation: str) -> ProductTable | None:
        # ids outside the column range cannot exist and would fail to bind
        if not -_MAX_ID - 1 <= product_id <= _MAX_ID:
            return None

        with self._store_call(operation):
            return self._session.get(ProductTable, product_id)
