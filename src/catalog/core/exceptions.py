"""Domain and infrastructure exceptions.

Raised by the store adapter and the validation layer. The API layer
translates them into HTTP responses through the exception handlers
registered on the application.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.catalog.api.http.validation.rules import Finding


class CatalogError(Exception):
    """Base class for every error raised by the catalog service."""


class RequestValidationFailed(CatalogError):
    """One or more validation rules reported a finding for the request."""

    def __init__(self, findings: Sequence[Finding]) -> None:
        super().__init__(f"{len(findings)} validation finding(s)")
        self.findings = tuple(findings)


class ProductNotFoundError(CatalogError):
    """The requested product does not exist."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class StorePersistenceError(CatalogError):
    """The store rejected a read or a write.

    ``operation`` names the repository call that failed; the original
    driver error is chained as ``__cause__`` and never shown to clients.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f"Store operation '{operation}' failed")
        self.operation = operation


class ConnectionBootstrapError(CatalogError):
    """The store could not be reached while the application was starting."""
