"""Entity: Product."""

from typing import Any

from pydantic import BaseModel, Field

from src.catalog.entities._base import Entity


class Product(Entity):
    """Product entity representing a catalog item.

    This is the domain model returned by the repository and serialized in
    API responses. ``price`` is always strictly positive.
    """

    name: str = Field(min_length=1, description="Product name")
    price: float = Field(gt=0, description="Product price")
    availability: bool = Field(default=True, description="Whether it can be sold")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.price == other.price
            and self.availability == other.availability
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.name, self.price, self.availability))


class ProductCreate(BaseModel):
    """Fields accepted when a product is created."""

    name: str = Field(min_length=1)
    price: float = Field(gt=0)


class ProductUpdate(ProductCreate):
    """Fields replaced by a full update."""

    availability: bool
