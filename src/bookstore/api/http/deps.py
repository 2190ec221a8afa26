"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Depends, Request

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.core.services import DbClientService
from src.bookstore.entities.service.book import BookRepository
from src.bookstore.runtime.config.config_data import ConfigData


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the application was built with."""
    return request.app.state.config


def get_db_service(request: Request) -> DbClientService:
    """Get the database client service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_book_repository(
    db: DbClientService = Depends(get_db_service),
) -> BookRepository:
    """Get a book repository bound to the shared collection."""
    return BookRepository(db.get_collection())
