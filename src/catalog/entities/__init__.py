"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model returned to the API layer
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .service.product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductTable,
    ProductUpdate,
)

__all__ = [
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductTable",
    "ProductRepository",
]
