"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.entities.service.product import ProductRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies built by the application factory."""
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Open a database session for the duration of one request."""
    with app_deps.database_service.get_session() as session:
        yield session


def get_product_repository(
    session: Session = Depends(get_db_session),
) -> ProductRepository:
    return ProductRepository(session)
