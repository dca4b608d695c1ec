from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from loguru import logger
from sqlalchemy import StaticPool
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from src.catalog.api.http.app import create_app
from src.catalog.core.services import DbSessionService
from src.catalog.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
)


@pytest.fixture
def test_config() -> ConfigData:
    return ConfigData(
        app=AppConfig(environment="test"),
        database=DatabaseConfig(url="sqlite://", create_tables=True),
    )


@pytest.fixture
def engine() -> Generator[Engine]:
    """In-memory engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.catalog.entities.service.product import ProductTable  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session]:
    """Create a fresh database session for testing."""
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def database_service(test_config: ConfigData, engine: Engine) -> DbSessionService:
    return DbSessionService(test_config.database, engine=engine)


@pytest.fixture
def app(test_config: ConfigData, database_service: DbSessionService) -> FastAPI:
    return create_app(
        config=test_config,
        database_service=database_service,
        setup_logging=False,
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient]:
    """Test client with startup/shutdown events applied."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def create_product(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a product through the API and return its ``data`` payload."""

    def _create(name: str = "Monitor Curved 49 inch", price: Any = 399) -> dict[str, Any]:
        response = client.post("/api/products", json={"name": name, "price": price})
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def log_messages() -> Generator[list[str]]:
    """Capture loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]))
    try:
        yield messages
    finally:
        logger.remove(handler_id)
