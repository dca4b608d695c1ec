"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.routers.health import router as health_router
from src.catalog.api.http.routers.product import router as product_router
from src.catalog.api.utils.app_startup import configure_logging
from src.catalog.core.exceptions import (
    ConnectionBootstrapError,
    ProductNotFoundError,
    RequestValidationFailed,
    StorePersistenceError,
)
from src.catalog.core.services import DbSessionService
from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import get_config

INTERNAL_ERROR_BODY = {"error": "Internal server error"}

# expose the factory and lifecycle hooks for the CLI and tests
__all__ = ["create_app", "connect_db", "shutdown"]


async def connect_db(app: FastAPI) -> None:
    """Connect to the store before the app accepts traffic.

    On failure the error is logged. With ``database.fail_fast`` the
    :class:`ConnectionBootstrapError` propagates and startup aborts;
    otherwise the app serves degraded and ``/health/ready`` reports 503.
    """
    app_deps: ApplicationDependencies = app.state.app_dependencies
    config: ConfigData = app.state.config

    try:
        app_deps.database_service.connect()
    except ConnectionBootstrapError:
        app_deps.store_ready = False
        logger.exception("Error trying to connect")
        if config.database.fail_fast:
            raise
        logger.warning("Serving without a database connection; requests will fail")
        return

    app_deps.store_ready = True
    logger.info("Successfully connected to DB")


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_deps: ApplicationDependencies = app.state.app_dependencies
    app_deps.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_db(app)
    try:
        yield
    finally:
        await shutdown(app)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationFailed)
    async def validation_failed(
        request: Request, exc: RequestValidationFailed
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"errors": [finding.model_dump(mode="json") for finding in exc.findings]},
        )

    @app.exception_handler(ProductNotFoundError)
    async def product_not_found(
        request: Request, exc: ProductNotFoundError
    ) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Product not found"})

    @app.exception_handler(StorePersistenceError)
    async def store_failure(request: Request, exc: StorePersistenceError) -> JSONResponse:
        logger.bind(
            status_code=500,
            operation=exc.operation,
            error_type=type(exc.__cause__).__name__,
        ).opt(exception=exc).error("request.store_error")
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def _register_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }

        start = time.perf_counter()

        # Everything that logs within this block inherits base_ctx
        with logger.contextualize(**base_ctx):
            logger.info("request.start")
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content=INTERNAL_ERROR_BODY,
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")
            response.headers.setdefault("X-Request-ID", request_id)
            return response


def create_app(
    config: ConfigData | None = None,
    database_service: DbSessionService | None = None,
    setup_logging: bool = True,
) -> FastAPI:
    """Build the application and its dependencies.

    Args:
        config: configuration to use; defaults to the current context.
        database_service: prebuilt store service, e.g. over an in-memory
            engine in tests. Built from ``config.database`` when omitted.
        setup_logging: install the loguru sinks from ``config.logging``.
    """
    config = config or get_config()
    if setup_logging:
        configure_logging(config)

    is_production = config.app.environment == "production"
    app = FastAPI(
        title="Product Catalog API",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    app.state.config = config
    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service or DbSessionService(config.database),
    )

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    _register_request_logging(app)
    _register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(product_router, prefix=config.app.api_prefix)

    return app
