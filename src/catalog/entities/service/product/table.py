"""Product database table model."""

from sqlmodel import Field

from src.catalog.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "products"
    # ids are never handed out twice, even after the highest row is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    name: str = Field(nullable=False)
    price: float = Field(nullable=False)
    availability: bool = Field(default=True, nullable=False)
