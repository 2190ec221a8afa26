"""FastAPI application factory shared by every bookstore service."""

import os
import time
import uuid
from contextlib import asynccontextmanager
from typing import get_args

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from loguru import logger
from pymongo.errors import PyMongoError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.api.http.routers import frontend, health
from src.bookstore.api.http.routers.service import book
from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.services import DbClientService, DbManageService
from src.bookstore.core.services.database.db_session import ClientFactory
from src.bookstore.entities.service.book import InvalidBookIdError
from src.bookstore.runtime.config.config_data import ConfigData, ServiceName
from src.bookstore.runtime.context import get_config

STATIC_DIR = frontend.TEMPLATES_DIR.parent / "static"

SERVICE_ROUTERS = {
    "get": book.list_router,
    "post": book.create_router,
    "put": book.update_router,
    "delete": book.delete_router,
}

__all__ = ["create_app", "create_service_app", "startup", "shutdown"]


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        return response


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    """Connect to MongoDB and bootstrap the shared collection.

    Any failure here is fatal: the exception propagates out of the lifespan
    and the server process exits nonzero.
    """
    config: ConfigData = app.state.config
    service: ServiceName = app.state.service
    logger.info(
        "Starting {} service in {} environment", service, config.app.environment
    )

    database_service = DbClientService(
        config.database, client_factory=app.state.client_factory
    )
    try:
        database_service.connect()
        DbManageService(
            database_service.database, database_service.collection_name
        ).prepare(seed=config.books.seed_on_startup)
    except Exception:
        logger.exception("Startup of {} service failed", service)
        database_service.close()
        raise

    app.state.app_dependencies = ApplicationDependencies(
        service=service,
        database_service=database_service,
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down {} service", app.state.service)
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


# --- Request logging middleware ---
def _client_ip(request: Request) -> str:
    # Behind the method-routing proxy the client address is in X-Forwarded-For
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


async def log_requests(request: Request, call_next):
    """Log every request under a request id and echo it as X-Request-ID.

    Errors that escape the exception handlers become a 500 carrying the id.
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()

    with logger.contextualize(
        request_id=request_id,
        service=request.app.state.service,
        method=request.method,
        path=request.url.path,
        client_ip=_client_ip(request),
    ):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.bind(
                status_code=500,
                duration_ms=_elapsed_ms(started),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        logger.bind(
            status_code=response.status_code, duration_ms=_elapsed_ms(started)
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


# --- Exception handlers ---
async def invalid_book_id_handler(request: Request, exc: InvalidBookIdError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.bind(error_type=type(exc).__name__).error("Storage error: {}", exc)
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


def create_app(
    service: ServiceName,
    config: ConfigData | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """Build the FastAPI application for one bookstore service.

    Args:
        service: Which process to build: ``frontend`` or one of the verb
            services ``get``, ``post``, ``put``, ``delete``.
        config: Configuration to use; defaults to the active context config.
        client_factory: Callable creating the MongoDB client, for tests.
    """
    if service not in get_args(ServiceName):
        raise ValueError(f"Unknown service {service!r}")

    config = config or get_config()
    configure_logging(service, config)

    production = config.app.environment == "production"
    app = FastAPI(
        title=f"bookstore-{service}",
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    app.state.service = service
    app.state.config = config
    app.state.client_factory = client_factory

    app.add_middleware(SecurityHeadersMiddleware)
    app.middleware("http")(log_requests)

    app.add_exception_handler(InvalidBookIdError, invalid_book_id_handler)
    app.add_exception_handler(PyMongoError, storage_error_handler)

    app.include_router(health.router)

    if service == "frontend":
        templates_dir = config.app.templates_dir or str(frontend.TEMPLATES_DIR)
        app.state.templates = Jinja2Templates(directory=templates_dir)
        app.mount("/css", StaticFiles(directory=STATIC_DIR / "css"), name="css")
        app.include_router(frontend.router)
    else:
        app.include_router(SERVICE_ROUTERS[service], prefix="/api/books")

    return app


def create_service_app() -> FastAPI:
    """Factory for ``uvicorn --factory``; the service comes from BOOKSTORE_SERVICE."""
    return create_app(os.getenv("BOOKSTORE_SERVICE", "frontend"))


if __name__ == "__main__":
    import uvicorn

    service_name = os.getenv("BOOKSTORE_SERVICE", "frontend")
    listener = get_config().services.for_service(service_name)
    uvicorn.run(
        create_app(service_name),
        host=listener.host,
        port=listener.port,
        access_log=False,  # We handle access logging in middleware
    )
